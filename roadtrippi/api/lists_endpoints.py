"""
List API endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.core.db import get_db
from roadtrippi.core.dependencies import get_current_user_id, get_optional_user_id
from roadtrippi.schemas.attraction_list import ListDetail, ListSummaryResponse
from roadtrippi.schemas.comment import CommentListResponse
from roadtrippi.services.list_service import ListService

router = APIRouter(prefix="/api/lists", tags=["lists"])


@router.get("", response_model=ListSummaryResponse)
async def list_my_lists(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """The caller's lists with item counts, newest first"""
    items = await ListService(db).list_my_lists(user_id)
    return ListSummaryResponse(items=items)


@router.get("/{list_id}", response_model=ListDetail)
async def get_list(
    list_id: int,
    db: AsyncSession = Depends(get_db),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
):
    """
    List detail with enriched attractions

    Private lists: 401 when anonymous, 403 for users other than the owner.
    """
    return await ListService(db).get_list_detail(list_id, viewer_id)


@router.get("/{list_id}/comments", response_model=CommentListResponse)
async def list_list_comments(
    list_id: int,
    db: AsyncSession = Depends(get_db),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
):
    """Comments on a list, oldest first; same visibility rule as the detail"""
    items = await ListService(db).list_comments(list_id, viewer_id)
    return CommentListResponse(items=items)
