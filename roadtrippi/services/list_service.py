"""
List Service - list headers, list detail and list comments, with private-list visibility
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roadtrippi.core.exceptions import AuthenticationRequiredError, NotFoundError, PermissionDeniedError
from roadtrippi.models import AttractionList, Like, LikeTargetType, ListComment, ListItem, User
from roadtrippi.schemas.attraction_list import ListDetail, ListItemRead, ListSummary
from roadtrippi.schemas.comment import CommentRead
from roadtrippi.schemas.user import UserSummary
from roadtrippi.services.attraction_stats import build_attraction_read, fetch_rating_stats, fetch_visit_counts


class ListService:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _ensure_visible(attraction_list: AttractionList, viewer_id: Optional[int]) -> None:
        if attraction_list.public:
            return
        if viewer_id is None:
            raise AuthenticationRequiredError()
        if viewer_id != attraction_list.user_id:
            raise PermissionDeniedError("Not allowed to view this list")

    async def get_list_detail(self, list_id: int, viewer_id: Optional[int]) -> ListDetail:
        """
        Load a list with its items in position order.

        Private lists are only visible to their owner.

        Raises:
            NotFoundError: unknown list id
            AuthenticationRequiredError: private list, anonymous viewer
            PermissionDeniedError: private list, other user
        """
        stmt = (
            select(AttractionList)
            .options(selectinload(AttractionList.items).selectinload(ListItem.attraction))
            .where(AttractionList.id == list_id)
        )
        attraction_list = (await self.db.execute(stmt)).scalar_one_or_none()
        if attraction_list is None:
            raise NotFoundError("List", list_id)

        self._ensure_visible(attraction_list, viewer_id)

        attraction_ids = [item.attraction_id for item in attraction_list.items]
        visit_counts = await fetch_visit_counts(self.db, attraction_ids)
        rating_stats = await fetch_rating_stats(self.db, attraction_ids)

        items = [
            ListItemRead(
                id=item.id,
                attraction_id=item.attraction_id,
                position=item.position,
                notes=item.notes,
                attraction=build_attraction_read(
                    item.attraction,
                    visit_count=visit_counts.get(item.attraction_id, 0),
                    rating=rating_stats.get(item.attraction_id),
                ),
            )
            for item in attraction_list.items
        ]

        like_filter = (Like.target_type == LikeTargetType.LIST, Like.target_id == list_id)
        like_count = (
            await self.db.execute(select(func.count()).select_from(Like).where(*like_filter))
        ).scalar_one()
        liked_by_me = False
        if viewer_id is not None:
            mine = await self.db.execute(select(Like.id).where(*like_filter, Like.user_id == viewer_id))
            liked_by_me = mine.first() is not None

        return ListDetail(
            id=attraction_list.id,
            user_id=attraction_list.user_id,
            title=attraction_list.title,
            description=attraction_list.description,
            public=attraction_list.public,
            created_at=attraction_list.created_at,
            items=items,
            like_count=like_count,
            liked_by_me=liked_by_me,
        )

    async def _summaries(self, *conditions) -> List[ListSummary]:
        item_counts = (
            select(ListItem.list_id, func.count(ListItem.id).label("item_count"))
            .group_by(ListItem.list_id)
            .subquery()
        )
        stmt = (
            select(AttractionList, func.coalesce(item_counts.c.item_count, 0))
            .outerjoin(item_counts, item_counts.c.list_id == AttractionList.id)
            .where(*conditions)
            .order_by(AttractionList.created_at.desc(), AttractionList.id.desc())
        )
        return [
            ListSummary(
                id=attraction_list.id,
                title=attraction_list.title,
                description=attraction_list.description,
                public=attraction_list.public,
                created_at=attraction_list.created_at,
                item_count=item_count,
            )
            for attraction_list, item_count in (await self.db.execute(stmt)).all()
        ]

    async def list_my_lists(self, user_id: int) -> List[ListSummary]:
        """All of the caller's lists, public and private, newest first."""
        return await self._summaries(AttractionList.user_id == user_id)

    async def list_public_lists(self, owner_id: int) -> List[ListSummary]:
        """
        Another user's public lists.

        Raises:
            NotFoundError: unknown user id
        """
        if await self.db.get(User, owner_id) is None:
            raise NotFoundError("User", owner_id)
        return await self._summaries(AttractionList.user_id == owner_id, AttractionList.public.is_(True))

    async def list_comments(self, list_id: int, viewer_id: Optional[int]) -> List[CommentRead]:
        """
        Comments on a list, oldest first, under the same visibility rule as the detail.

        Raises:
            NotFoundError: unknown list id
            AuthenticationRequiredError: private list, anonymous viewer
            PermissionDeniedError: private list, other user
        """
        attraction_list = await self.db.get(AttractionList, list_id)
        if attraction_list is None:
            raise NotFoundError("List", list_id)
        self._ensure_visible(attraction_list, viewer_id)

        stmt = (
            select(ListComment)
            .options(selectinload(ListComment.user))
            .where(ListComment.list_id == list_id)
            .order_by(ListComment.created_at.asc(), ListComment.id.asc())
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
