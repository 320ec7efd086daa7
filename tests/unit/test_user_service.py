"""
User directory, public profile and public follow list tests
"""
from datetime import date

import pytest
import pytest_asyncio

from roadtrippi.core.exceptions import NotFoundError
from roadtrippi.models import AttractionList, Follow
from roadtrippi.services.user_service import UserService
from tests.factories import at, make_attraction, make_check_in, make_user


@pytest_asyncio.fixture
async def people(db_session):
    """maria and mark follow dana; dana follows maria."""
    dana, maria, mark, zed = (make_user(n) for n in ("dana", "maria", "mark", "zed_100%"))
    ranch = make_attraction("Cadillac Ranch", city="Amarillo", state="TX")
    db_session.add_all([dana, maria, mark, zed, ranch])
    await db_session.flush()
    db_session.add_all([
        make_check_in(dana, ranch, rating=5.0, minutes=1, visit_date=date(2024, 1, 1)),
        make_check_in(dana, ranch, rating=4.0, minutes=2, visit_date=date(2024, 2, 1)),
        make_check_in(maria, ranch, rating=3.0, minutes=3),
        AttractionList(user_id=dana.id, title="Public", public=True, created_at=at(0)),
        AttractionList(user_id=dana.id, title="Private", public=False, created_at=at(1)),
        Follow(follower_id=maria.id, following_id=dana.id, created_at=at(4)),
        Follow(follower_id=mark.id, following_id=dana.id, created_at=at(5)),
        Follow(follower_id=dana.id, following_id=maria.id, created_at=at(6)),
    ])
    await db_session.commit()
    return {"dana": dana, "maria": maria, "mark": mark, "zed": zed}


@pytest.mark.asyncio
async def test_directory_ordered_by_username_with_counts(query_session, people):
    page = await UserService(query_session).search_users(page=1, limit=20)
    assert page.total == 4
    assert [u.username for u in page.items] == ["dana", "maria", "mark", "zed_100%"]
    dana = page.items[0]
    assert dana.check_in_count == 2
    assert dana.followers_count == 2
    assert page.items[2].check_in_count == 0


@pytest.mark.asyncio
async def test_directory_search_is_case_insensitive_substring(query_session, people):
    page = await UserService(query_session).search_users(page=1, limit=20, search="MAR")
    assert [u.username for u in page.items] == ["maria", "mark"]
    assert page.total == 2


@pytest.mark.asyncio
async def test_directory_search_escapes_wildcards(query_session, people):
    page = await UserService(query_session).search_users(page=1, limit=20, search="0%")
    assert [u.username for u in page.items] == ["zed_100%"]


@pytest.mark.asyncio
async def test_directory_blank_search_lists_everyone(query_session, people):
    page = await UserService(query_session).search_users(page=1, limit=20, search="   ")
    assert page.total == 4


@pytest.mark.asyncio
async def test_directory_pagination(query_session, people):
    page = await UserService(query_session).search_users(page=2, limit=3)
    assert page.total == 4
    assert [u.username for u in page.items] == ["zed_100%"]


@pytest.mark.asyncio
async def test_profile_counts_and_recent_check_ins(query_session, people):
    profile = await UserService(query_session).get_profile(people["dana"].id)
    assert profile.username == "dana"
    assert profile.check_in_count == 2
    assert profile.list_count == 2
    assert profile.followers_count == 2
    assert profile.following_count == 1
    assert [c.visit_date for c in profile.recent_check_ins] == [date(2024, 2, 1), date(2024, 1, 1)]
    assert profile.recent_check_ins[0].attraction.name == "Cadillac Ranch"


@pytest.mark.asyncio
async def test_profile_of_unknown_user(query_session, people):
    with pytest.raises(NotFoundError):
        await UserService(query_session).get_profile(9999)


@pytest.mark.asyncio
async def test_public_follow_lists(query_session, people):
    service = UserService(query_session)
    followers = await service.list_followers(people["dana"].id)
    assert [u.username for u in followers] == ["mark", "maria"]
    following = await service.list_following(people["dana"].id)
    assert [u.username for u in following] == ["maria"]


@pytest.mark.asyncio
async def test_follow_lists_of_unknown_user(query_session, people):
    service = UserService(query_session)
    with pytest.raises(NotFoundError):
        await service.list_followers(9999)
    with pytest.raises(NotFoundError):
        await service.list_following(9999)
