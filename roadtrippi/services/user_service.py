"""
User Service - user discovery, public profiles and another user's follow lists
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.config import get_settings
from roadtrippi.core.exceptions import NotFoundError
from roadtrippi.models import AttractionList, CheckIn, Follow, User
from roadtrippi.schemas.profile import UserDirectoryEntry, UserPage, UserProfile
from roadtrippi.schemas.user import UserProfileSummary
from roadtrippi.services.check_in_service import CheckInService
from roadtrippi.services.social_service import SocialService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.query_settings = get_settings().query

    async def _require_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def _counts_by(self, column, user_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(user_ids)
        if not ids:
            return {}
        stmt = select(column, func.count()).where(column.in_(ids)).group_by(column)
        return {user_id: count for user_id, count in (await self.db.execute(stmt)).all()}

    async def search_users(self, page: int, limit: int, search: Optional[str] = None) -> UserPage:
        """
        Paginated user directory ordered by username.

        ``search`` matches a case-insensitive substring of the username;
        a blank value lists everyone.
        """
        conditions = []
        search = search.strip() if search else None
        if search:
            conditions.append(User.username.icontains(search, autoescape=True))

        stmt = (
            select(User)
            .where(*conditions)
            .order_by(User.username.asc(), User.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        users = list((await self.db.execute(stmt)).scalars().all())
        total = (
            await self.db.execute(select(func.count()).select_from(User).where(*conditions))
        ).scalar_one()

        logger.debug("User search", extra={"search": search, "page": page, "total": total})

        ids = [u.id for u in users]
        check_in_counts = await self._counts_by(CheckIn.user_id, ids)
        follower_counts = await self._counts_by(Follow.following_id, ids)
        items = [
            UserDirectoryEntry(
                **UserProfileSummary.model_validate(user).model_dump(),
                check_in_count=check_in_counts.get(user.id, 0),
                followers_count=follower_counts.get(user.id, 0),
            )
            for user in users
        ]
        return UserPage(items=items, total=total, page=page, limit=limit)

    async def get_profile(self, user_id: int) -> UserProfile:
        """
        Public profile with counts and the most recent visits.

        Raises:
            NotFoundError: unknown user id
        """
        user = await self._require_user(user_id)
        ids = [user_id]
        check_ins = (await self._counts_by(CheckIn.user_id, ids)).get(user_id, 0)
        lists = (await self._counts_by(AttractionList.user_id, ids)).get(user_id, 0)
        followers = (await self._counts_by(Follow.following_id, ids)).get(user_id, 0)
        following = (await self._counts_by(Follow.follower_id, ids)).get(user_id, 0)
        recent = await CheckInService(self.db).list_user_check_ins(
            user_id, limit=self.query_settings.profile_recent_check_ins
        )
        return UserProfile(
            **UserProfileSummary.model_validate(user).model_dump(),
            check_in_count=check_ins,
            list_count=lists,
            followers_count=followers,
            following_count=following,
            recent_check_ins=recent,
        )

    async def list_followers(self, user_id: int) -> List[UserProfileSummary]:
        """Raises NotFoundError for an unknown user id."""
        await self._require_user(user_id)
        return await SocialService(self.db).list_followers(user_id)

    async def list_following(self, user_id: int) -> List[UserProfileSummary]:
        """Raises NotFoundError for an unknown user id."""
        await self._require_user(user_id)
        return await SocialService(self.db).list_following(user_id)
