"""
Follow graph and home feed tests
"""
import pytest
import pytest_asyncio

from roadtrippi.models import Follow, Like, LikeTargetType
from roadtrippi.services.social_service import SocialService
from tests.factories import at, make_attraction, make_check_in, make_user


@pytest_asyncio.fixture
async def follow_graph(db_session):
    """alice <-> bob are friends, alice -> carol one way, dave -> alice one way."""
    alice, bob, carol, dave = (make_user(n) for n in ("alice", "bob", "carol", "dave"))
    ranch = make_attraction("Mystery Spot", state="US", address="465 Mystery Spot Rd, Santa Cruz, CA")
    db_session.add_all([alice, bob, carol, dave, ranch])
    await db_session.flush()

    bob_check_in = make_check_in(bob, ranch, rating=4.0, minutes=5, review="Gravity is weird")
    carol_check_in = make_check_in(carol, ranch, rating=None, minutes=9)
    dave_check_in = make_check_in(dave, ranch, rating=2.0, minutes=12)
    db_session.add_all([
        Follow(follower_id=alice.id, following_id=bob.id, created_at=at(1)),
        Follow(follower_id=bob.id, following_id=alice.id, created_at=at(2)),
        Follow(follower_id=alice.id, following_id=carol.id, created_at=at(3)),
        Follow(follower_id=dave.id, following_id=alice.id, created_at=at(4)),
        bob_check_in,
        carol_check_in,
        dave_check_in,
    ])
    await db_session.flush()
    db_session.add_all([
        Like(user_id=alice.id, target_id=bob_check_in.id, target_type=LikeTargetType.REVIEW, created_at=at(20)),
        Like(user_id=dave.id, target_id=bob_check_in.id, target_type=LikeTargetType.REVIEW, created_at=at(21)),
    ])
    await db_session.commit()
    return {"users": (alice, bob, carol, dave), "bob_check_in": bob_check_in}


@pytest.mark.asyncio
async def test_social_counts(query_session, follow_graph):
    alice, bob, carol, dave = follow_graph["users"]
    counts = await SocialService(query_session).get_social_counts(alice.id)
    assert counts.followers_count == 2
    assert counts.following_count == 2
    assert counts.friends_count == 1


@pytest.mark.asyncio
async def test_follow_lists(query_session, follow_graph):
    alice, bob, carol, dave = follow_graph["users"]
    service = SocialService(query_session)

    followers = await service.list_followers(alice.id)
    following = await service.list_following(alice.id)
    friends = await service.list_friends(alice.id)

    assert {u.username for u in followers} == {"bob", "dave"}
    assert {u.username for u in following} == {"bob", "carol"}
    assert [u.username for u in friends] == ["bob"]


@pytest.mark.asyncio
async def test_feed_shows_followed_users_newest_first(query_session, follow_graph):
    alice, bob, carol, dave = follow_graph["users"]
    items = await SocialService(query_session).get_feed(alice.id, limit=30)

    assert [item.user.username for item in items] == ["carol", "bob"]
    bob_item = items[1]
    assert bob_item.review == "Gravity is weird"
    assert bob_item.like_count == 2
    assert bob_item.liked_by_me is True
    assert items[0].liked_by_me is False
    assert (bob_item.attraction.city, bob_item.attraction.state) == ("Santa Cruz", "CA")


@pytest.mark.asyncio
async def test_feed_limit(query_session, follow_graph):
    alice, bob, carol, dave = follow_graph["users"]
    items = await SocialService(query_session).get_feed(alice.id, limit=1)
    assert [item.user.username for item in items] == ["carol"]


@pytest.mark.asyncio
async def test_feed_empty_when_following_no_one(query_session, follow_graph):
    alice, bob, carol, dave = follow_graph["users"]
    assert await SocialService(query_session).get_feed(carol.id, limit=30) == []
