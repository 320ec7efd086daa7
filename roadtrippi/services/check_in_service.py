"""
Check-in Service - the caller's visit history and review comment threads
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roadtrippi.core.exceptions import NotFoundError
from roadtrippi.models import CheckIn, Comment
from roadtrippi.schemas.check_in import CheckInSummary
from roadtrippi.schemas.comment import CommentRead
from roadtrippi.schemas.feed import FeedAttraction
from roadtrippi.schemas.user import UserSummary
from roadtrippi.services.address import resolve_city_state


def check_in_summary(check_in: CheckIn) -> CheckInSummary:
    """Check-in plus its attraction header; needs ``check_in.attraction`` loaded."""
    attraction = check_in.attraction
    city, state = resolve_city_state(attraction.city, attraction.state, attraction.address)
    return CheckInSummary(
        id=check_in.id,
        attraction_id=check_in.attraction_id,
        rating=check_in.rating,
        review=check_in.review,
        visit_date=check_in.visit_date,
        created_at=check_in.created_at,
        attraction=FeedAttraction(
            id=attraction.id,
            name=attraction.name,
            city=city,
            state=state,
            image_url=attraction.image_url,
        ),
    )


class CheckInService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_user_check_ins(self, user_id: int, limit: Optional[int] = None) -> List[CheckInSummary]:
        """Visits by ``user_id``, most recent visit date first."""
        stmt = (
            select(CheckIn)
            .options(selectinload(CheckIn.attraction))
            .where(CheckIn.user_id == user_id)
            .order_by(CheckIn.visit_date.desc(), CheckIn.created_at.desc(), CheckIn.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        check_ins = (await self.db.execute(stmt)).scalars().all()
        return [check_in_summary(c) for c in check_ins]

    async def list_comments(self, check_in_id: int) -> List[CommentRead]:
        """
        Comments on a check-in review, oldest first.

        Raises:
            NotFoundError: unknown check-in id
        """
        if await self.db.get(CheckIn, check_in_id) is None:
            raise NotFoundError("Check-in", check_in_id)

        stmt = (
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.check_in_id == check_in_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        comments = (await self.db.execute(stmt)).scalars().all()
        return [
            CommentRead(
                id=comment.id,
                text=comment.text,
                created_at=comment.created_at,
                user=UserSummary.model_validate(comment.user),
            )
            for comment in comments
        ]
