"""
Inbox aggregation tests
"""
import pytest
import pytest_asyncio

from roadtrippi.models import AttractionList, Comment, Follow, Like, LikeTargetType, ListComment
from roadtrippi.schemas.inbox import InboxItemType
from roadtrippi.services.inbox_service import InboxService, comment_snippet
from tests.factories import at, make_attraction, make_check_in, make_user


@pytest_asyncio.fixture
async def social_graph(db_session):
    """
    bob owns a check-in and a list; alice and carol interact with them,
    and bob interacts with his own content.
    """
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    ranch = make_attraction("Cadillac Ranch", city="Amarillo", state="TX")
    db_session.add_all([alice, bob, carol, ranch])
    await db_session.flush()

    bob_check_in = make_check_in(bob, ranch, rating=4.5, minutes=0)
    alice_check_in = make_check_in(alice, ranch, rating=3.0, minutes=0)
    bob_list = AttractionList(user_id=bob.id, title="Route 66 Oddities", public=True, created_at=at(0))
    db_session.add_all([bob_check_in, alice_check_in, bob_list])
    await db_session.flush()

    db_session.add_all([
        Like(user_id=alice.id, target_id=bob_check_in.id, target_type=LikeTargetType.REVIEW, created_at=at(10)),
        Like(user_id=bob.id, target_id=bob_check_in.id, target_type=LikeTargetType.REVIEW, created_at=at(11)),
        Like(user_id=carol.id, target_id=bob_list.id, target_type=LikeTargetType.LIST, created_at=at(12)),
        Like(user_id=bob.id, target_id=bob_list.id, target_type=LikeTargetType.LIST, created_at=at(13)),
        Like(user_id=bob.id, target_id=alice_check_in.id, target_type=LikeTargetType.REVIEW, created_at=at(14)),
        Comment(user_id=carol.id, check_in_id=bob_check_in.id, text="x" * 150, created_at=at(15)),
        Comment(user_id=bob.id, check_in_id=bob_check_in.id, text="replying to myself", created_at=at(16)),
        ListComment(user_id=alice.id, list_id=bob_list.id, text="Great list!", created_at=at(17)),
        ListComment(user_id=bob.id, list_id=bob_list.id, text="Thanks", created_at=at(18)),
        Follow(follower_id=alice.id, following_id=bob.id, created_at=at(19)),
        Follow(follower_id=bob.id, following_id=alice.id, created_at=at(20)),
    ])
    await db_session.commit()
    return {
        "users": (alice, bob, carol),
        "bob_check_in": bob_check_in,
        "alice_check_in": alice_check_in,
        "bob_list": bob_list,
        "ranch": ranch,
    }


@pytest.mark.asyncio
async def test_inbox_contains_every_kind_newest_first(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)

    assert [item.type for item in items] == [
        InboxItemType.FOLLOW,
        InboxItemType.COMMENT_LIST,
        InboxItemType.COMMENT_REVIEW,
        InboxItemType.LIKE_LIST,
        InboxItemType.LIKE_REVIEW,
    ]
    created = [item.created_at for item in items]
    assert created == sorted(created, reverse=True)


@pytest.mark.asyncio
async def test_inbox_excludes_self_activity(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)
    assert all(item.actor.id != bob.id for item in items)


@pytest.mark.asyncio
async def test_like_review_item_carries_attraction(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)
    like = next(item for item in items if item.type == InboxItemType.LIKE_REVIEW)

    assert like.actor.id == alice.id
    assert like.actor.username == "alice"
    assert like.id.startswith("like-review-")
    assert like.check_in_id == social_graph["bob_check_in"].id
    assert like.attraction_id == social_graph["ranch"].id
    assert like.attraction_name == "Cadillac Ranch"
    assert like.list_id is None


@pytest.mark.asyncio
async def test_like_list_item_carries_title(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)
    like = next(item for item in items if item.type == InboxItemType.LIKE_LIST)

    assert like.actor.id == carol.id
    assert like.list_id == social_graph["bob_list"].id
    assert like.list_title == "Route 66 Oddities"
    assert like.check_in_id is None


@pytest.mark.asyncio
async def test_comment_items(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)
    review_comment = next(item for item in items if item.type == InboxItemType.COMMENT_REVIEW)
    list_comment = next(item for item in items if item.type == InboxItemType.COMMENT_LIST)

    assert review_comment.comment_snippet == "x" * 100 + "…"
    assert review_comment.rating == 4.5
    assert review_comment.attraction_name == "Cadillac Ranch"
    assert list_comment.comment_snippet == "Great list!"
    assert list_comment.list_title == "Route 66 Oddities"
    assert list_comment.rating is None


@pytest.mark.asyncio
async def test_follow_item_id(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=50)
    follow = items[0]
    assert follow.id == f"follow-{alice.id}-{bob.id}"
    assert follow.actor.id == alice.id


@pytest.mark.asyncio
async def test_other_user_sees_no_mirror_of_their_own_like(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(alice.id, limit=50)

    # alice gets bob's like on her check-in and bob's follow, nothing from her own likes
    assert {item.type for item in items} == {InboxItemType.LIKE_REVIEW, InboxItemType.FOLLOW}
    assert all(item.actor.id == bob.id for item in items)


@pytest.mark.asyncio
async def test_user_without_content_gets_empty_inbox(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    assert await InboxService(query_session).get_inbox(carol.id, limit=50) == []


@pytest.mark.asyncio
async def test_inbox_is_capped(query_session, social_graph):
    alice, bob, carol = social_graph["users"]
    items = await InboxService(query_session).get_inbox(bob.id, limit=2)
    assert [item.type for item in items] == [InboxItemType.FOLLOW, InboxItemType.COMMENT_LIST]


@pytest.mark.asyncio
async def test_equal_timestamps_keep_merge_order(db_session, query_session):
    owner, fan = make_user("owner"), make_user("fan")
    ranch = make_attraction("Cadillac Ranch")
    db_session.add_all([owner, fan, ranch])
    await db_session.flush()
    check_in = make_check_in(owner, ranch, rating=5.0)
    own_list = AttractionList(user_id=owner.id, title="Favorites", public=True, created_at=at(0))
    db_session.add_all([check_in, own_list])
    await db_session.flush()
    same = at(30)
    db_session.add_all([
        Follow(follower_id=fan.id, following_id=owner.id, created_at=same),
        ListComment(user_id=fan.id, list_id=own_list.id, text="nice", created_at=same),
        Comment(user_id=fan.id, check_in_id=check_in.id, text="wow", created_at=same),
        Like(user_id=fan.id, target_id=own_list.id, target_type=LikeTargetType.LIST, created_at=same),
        Like(user_id=fan.id, target_id=check_in.id, target_type=LikeTargetType.REVIEW, created_at=same),
    ])
    await db_session.commit()

    items = await InboxService(query_session).get_inbox(owner.id, limit=10)
    assert [item.type for item in items] == [
        InboxItemType.LIKE_REVIEW,
        InboxItemType.LIKE_LIST,
        InboxItemType.COMMENT_REVIEW,
        InboxItemType.COMMENT_LIST,
        InboxItemType.FOLLOW,
    ]


def test_comment_snippet():
    assert comment_snippet("short") == "short"
    assert comment_snippet("y" * 100) == "y" * 100
    assert comment_snippet("y" * 101) == "y" * 100 + "…"
