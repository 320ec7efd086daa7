"""
Check-in API endpoints - the caller's visits and review comment threads
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.core.db import get_db
from roadtrippi.core.dependencies import get_current_user_id
from roadtrippi.schemas.check_in import CheckInListResponse
from roadtrippi.schemas.comment import CommentListResponse
from roadtrippi.services.check_in_service import CheckInService

router = APIRouter(prefix="/api/check-ins", tags=["check-ins"])


@router.get("/me", response_model=CheckInListResponse)
async def list_my_check_ins(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """The caller's check-ins, most recent visit first"""
    items = await CheckInService(db).list_user_check_ins(user_id)
    return CheckInListResponse(items=items)


@router.get("/{check_in_id}/comments", response_model=CommentListResponse)
async def list_check_in_comments(check_in_id: int, db: AsyncSession = Depends(get_db)):
    items = await CheckInService(db).list_comments(check_in_id)
    return CommentListResponse(items=items)
