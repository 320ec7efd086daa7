"""
User API endpoints - the caller's inbox, feed and follow graph, plus public user pages
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.config import get_settings
from roadtrippi.core.db import get_db
from roadtrippi.core.dependencies import get_current_user_id
from roadtrippi.core.metrics import record_latency
from roadtrippi.schemas.feed import FeedResponse
from roadtrippi.schemas.attraction_list import ListSummaryResponse
from roadtrippi.schemas.inbox import InboxResponse
from roadtrippi.schemas.profile import UserPage, UserProfile
from roadtrippi.schemas.user import SocialCounts, UserListResponse
from roadtrippi.services.inbox_service import InboxService
from roadtrippi.services.list_service import ListService
from roadtrippi.services.social_service import SocialService
from roadtrippi.services.user_service import UserService

settings = get_settings()

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserPage)
async def search_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.query.users_default_limit, ge=1, le=settings.query.users_max_limit),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    User directory ordered by username

    - **search**: case-insensitive username substring
    """
    return await UserService(db).search_users(page, limit, search)


@router.get("/me/inbox", response_model=InboxResponse)
async def get_inbox(
    limit: int = Query(settings.query.inbox_default_limit, ge=1, le=settings.query.inbox_max_limit),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Likes, comments and new followers on the caller's content, newest first

    - **limit**: Max results (default 50, max 100)
    """
    with record_latency("inbox"):
        items = await InboxService(db).get_inbox(user_id, limit)
    return InboxResponse(items=items)


@router.get("/me/feed", response_model=FeedResponse)
async def get_feed(
    limit: int = Query(settings.query.feed_default_limit, ge=1, le=settings.query.feed_max_limit),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Recent check-ins from people the caller follows"""
    with record_latency("feed"):
        items = await SocialService(db).get_feed(user_id, limit)
    return FeedResponse(items=items)


@router.get("/me/social", response_model=SocialCounts)
async def get_social_counts(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return await SocialService(db).get_social_counts(user_id)


@router.get("/me/followers", response_model=UserListResponse)
async def list_followers(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    items = await SocialService(db).list_followers(user_id)
    return UserListResponse(items=items)


@router.get("/me/following", response_model=UserListResponse)
async def list_following(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    items = await SocialService(db).list_following(user_id)
    return UserListResponse(items=items)


@router.get("/me/friends", response_model=UserListResponse)
async def list_friends(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Friends are mutual follows"""
    items = await SocialService(db).list_friends(user_id)
    return UserListResponse(items=items)


@router.get("/{user_id}", response_model=UserProfile)
async def get_user_profile(user_id: int, db: AsyncSession = Depends(get_db)):
    """Public profile with counts and recent check-ins"""
    return await UserService(db).get_profile(user_id)


@router.get("/{user_id}/lists", response_model=ListSummaryResponse)
async def list_user_lists(user_id: int, db: AsyncSession = Depends(get_db)):
    """Public lists of a user; private lists never appear here"""
    items = await ListService(db).list_public_lists(user_id)
    return ListSummaryResponse(items=items)


@router.get("/{user_id}/followers/list", response_model=UserListResponse)
async def list_user_followers(user_id: int, db: AsyncSession = Depends(get_db)):
    items = await UserService(db).list_followers(user_id)
    return UserListResponse(items=items)


@router.get("/{user_id}/following/list", response_model=UserListResponse)
async def list_user_following(user_id: int, db: AsyncSession = Depends(get_db)):
    items = await UserService(db).list_following(user_id)
    return UserListResponse(items=items)
