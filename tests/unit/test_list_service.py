"""
List detail tests: ordering, enrichment and visibility
"""
import pytest
import pytest_asyncio

from roadtrippi.core.exceptions import AuthenticationRequiredError, NotFoundError, PermissionDeniedError
from roadtrippi.models import AttractionList, Like, LikeTargetType, ListComment, ListItem
from roadtrippi.services.list_service import ListService
from tests.factories import at, make_attraction, make_check_in, make_user


@pytest_asyncio.fixture
async def lists(db_session):
    owner, friend = make_user("owner"), make_user("friend")
    ranch = make_attraction("Cadillac Ranch", city="Amarillo", state="TX")
    spot = make_attraction("Mystery Spot", state="US", address="465 Mystery Spot Rd, Santa Cruz, CA")
    db_session.add_all([owner, friend, ranch, spot])
    await db_session.flush()

    public_list = AttractionList(user_id=owner.id, title="Weird West", public=True, created_at=at(0))
    private_list = AttractionList(user_id=owner.id, title="Secret", public=False, created_at=at(1))
    db_session.add_all([public_list, private_list])
    await db_session.flush()

    db_session.add_all([
        ListItem(list_id=public_list.id, attraction_id=ranch.id, position=2, notes="Bring spray paint"),
        ListItem(list_id=public_list.id, attraction_id=spot.id, position=1),
        ListItem(list_id=private_list.id, attraction_id=ranch.id, position=0),
        make_check_in(friend, ranch, rating=4.0),
        make_check_in(owner, ranch, rating=5.0),
        Like(user_id=friend.id, target_id=public_list.id, target_type=LikeTargetType.LIST, created_at=at(5)),
        ListComment(user_id=owner.id, list_id=public_list.id, text="Route 66 favorites", created_at=at(7)),
        ListComment(user_id=friend.id, list_id=public_list.id, text="Adding these!", created_at=at(6)),
        ListComment(user_id=owner.id, list_id=private_list.id, text="Shh", created_at=at(8)),
    ])
    await db_session.commit()
    return {"owner": owner, "friend": friend, "public": public_list, "private": private_list}


@pytest.mark.asyncio
async def test_public_list_detail(query_session, lists):
    detail = await ListService(query_session).get_list_detail(lists["public"].id, viewer_id=None)

    assert detail.title == "Weird West"
    assert [item.attraction.name for item in detail.items] == ["Mystery Spot", "Cadillac Ranch"]
    spot, ranch = detail.items
    assert (spot.attraction.city, spot.attraction.state) == ("Santa Cruz", "CA")
    assert spot.attraction.avg_rating is None
    assert ranch.attraction.avg_rating == 4.5
    assert ranch.attraction.visit_count == 2
    assert ranch.notes == "Bring spray paint"
    assert detail.like_count == 1
    assert detail.liked_by_me is False


@pytest.mark.asyncio
async def test_liked_by_viewer(query_session, lists):
    detail = await ListService(query_session).get_list_detail(lists["public"].id, viewer_id=lists["friend"].id)
    assert detail.liked_by_me is True


@pytest.mark.asyncio
async def test_private_list_visible_to_owner(query_session, lists):
    detail = await ListService(query_session).get_list_detail(lists["private"].id, viewer_id=lists["owner"].id)
    assert detail.public is False
    assert len(detail.items) == 1


@pytest.mark.asyncio
async def test_private_list_requires_authentication(query_session, lists):
    with pytest.raises(AuthenticationRequiredError):
        await ListService(query_session).get_list_detail(lists["private"].id, viewer_id=None)


@pytest.mark.asyncio
async def test_private_list_hidden_from_other_users(query_session, lists):
    with pytest.raises(PermissionDeniedError):
        await ListService(query_session).get_list_detail(lists["private"].id, viewer_id=lists["friend"].id)


@pytest.mark.asyncio
async def test_unknown_list(query_session, lists):
    with pytest.raises(NotFoundError):
        await ListService(query_session).get_list_detail(12345, viewer_id=None)


@pytest.mark.asyncio
async def test_my_lists_include_private_with_item_counts(query_session, lists):
    summaries = await ListService(query_session).list_my_lists(lists["owner"].id)
    assert [(s.title, s.public, s.item_count) for s in summaries] == [
        ("Secret", False, 1),
        ("Weird West", True, 2),
    ]


@pytest.mark.asyncio
async def test_user_without_lists_has_none(query_session, lists):
    assert await ListService(query_session).list_my_lists(lists["friend"].id) == []


@pytest.mark.asyncio
async def test_public_lists_of_another_user(query_session, lists):
    summaries = await ListService(query_session).list_public_lists(lists["owner"].id)
    assert [s.title for s in summaries] == ["Weird West"]
    assert summaries[0].item_count == 2


@pytest.mark.asyncio
async def test_public_lists_of_unknown_user(query_session, lists):
    with pytest.raises(NotFoundError):
        await ListService(query_session).list_public_lists(9999)


@pytest.mark.asyncio
async def test_list_comments_oldest_first(query_session, lists):
    comments = await ListService(query_session).list_comments(lists["public"].id, viewer_id=None)
    assert [c.text for c in comments] == ["Adding these!", "Route 66 favorites"]
    assert comments[0].user.username == "friend"


@pytest.mark.asyncio
async def test_private_list_comments_follow_list_visibility(query_session, lists):
    service = ListService(query_session)
    with pytest.raises(AuthenticationRequiredError):
        await service.list_comments(lists["private"].id, viewer_id=None)
    with pytest.raises(PermissionDeniedError):
        await service.list_comments(lists["private"].id, viewer_id=lists["friend"].id)
    comments = await service.list_comments(lists["private"].id, viewer_id=lists["owner"].id)
    assert [c.text for c in comments] == ["Shh"]


@pytest.mark.asyncio
async def test_comments_on_unknown_list(query_session, lists):
    with pytest.raises(NotFoundError):
        await ListService(query_session).list_comments(12345, viewer_id=None)
