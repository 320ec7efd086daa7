"""
Social Service - follow graph views and the home feed
"""
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from roadtrippi.models import CheckIn, Follow, Like, LikeTargetType, User
from roadtrippi.schemas.feed import FeedAttraction, FeedItem
from roadtrippi.schemas.user import SocialCounts, UserProfileSummary, UserSummary
from roadtrippi.services.address import resolve_city_state
from roadtrippi.services.attraction_stats import fetch_review_like_counts

logger = logging.getLogger(__name__)


class SocialService:
    """Followers, following, friends (mutual follows) and the feed built on them"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _mutual_follows(self, user_id: int):
        """Edges X -> user where user -> X also exists."""
        reverse = aliased(Follow)
        return (
            select(Follow)
            .join(
                reverse,
                (reverse.follower_id == user_id) & (reverse.following_id == Follow.follower_id),
            )
            .where(Follow.following_id == user_id)
        )

    async def get_social_counts(self, user_id: int) -> SocialCounts:
        followers = await self.db.execute(
            select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
        )
        following = await self.db.execute(
            select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
        )
        friends = await self.db.execute(
            select(func.count()).select_from(self._mutual_follows(user_id).subquery())
        )
        return SocialCounts(
            followers_count=followers.scalar_one(),
            following_count=following.scalar_one(),
            friends_count=friends.scalar_one(),
        )

    async def list_followers(self, user_id: int) -> List[UserProfileSummary]:
        stmt = (
            select(Follow)
            .options(selectinload(Follow.follower))
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc())
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [UserProfileSummary.model_validate(f.follower) for f in rows]

    async def list_following(self, user_id: int) -> List[UserProfileSummary]:
        stmt = (
            select(Follow)
            .options(selectinload(Follow.following))
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc())
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [UserProfileSummary.model_validate(f.following) for f in rows]

    async def list_friends(self, user_id: int) -> List[UserProfileSummary]:
        stmt = (
            self._mutual_follows(user_id)
            .options(selectinload(Follow.follower))
            .order_by(Follow.created_at.desc())
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [UserProfileSummary.model_validate(f.follower) for f in rows]

    async def get_feed(self, user_id: int, limit: int) -> List[FeedItem]:
        """
        Most recent check-ins by followed users, newest first.

        Following no one yields an empty feed.
        """
        followed = select(Follow.following_id).where(Follow.follower_id == user_id)
        followed_ids = list((await self.db.execute(followed)).scalars().all())
        if not followed_ids:
            return []

        stmt = (
            select(CheckIn)
            .options(selectinload(CheckIn.user), selectinload(CheckIn.attraction))
            .where(CheckIn.user_id.in_(followed_ids))
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
            .limit(limit)
        )
        check_ins = list((await self.db.execute(stmt)).scalars().all())
        check_in_ids = [c.id for c in check_ins]

        like_counts = await fetch_review_like_counts(self.db, check_in_ids)
        liked_by_me = set()
        if check_in_ids:
            mine = await self.db.execute(
                select(Like.target_id).where(
                    Like.user_id == user_id,
                    Like.target_type == LikeTargetType.REVIEW,
                    Like.target_id.in_(check_in_ids),
                )
            )
            liked_by_me = set(mine.scalars().all())

        items = []
        for check_in in check_ins:
            attraction = check_in.attraction
            city, state = resolve_city_state(attraction.city, attraction.state, attraction.address)
            items.append(FeedItem(
                id=check_in.id,
                rating=check_in.rating,
                review=check_in.review,
                visit_date=check_in.visit_date,
                created_at=check_in.created_at,
                user=UserSummary.model_validate(check_in.user),
                attraction=FeedAttraction(
                    id=attraction.id,
                    name=attraction.name,
                    city=city,
                    state=state,
                    image_url=attraction.image_url,
                ),
                like_count=like_counts.get(check_in.id, 0),
                liked_by_me=check_in.id in liked_by_me,
            ))
        logger.debug("Feed assembled", extra={'user_id': user_id, 'items': len(items)})
        return items
