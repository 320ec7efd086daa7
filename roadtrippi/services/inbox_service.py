"""
Inbox Service - merges likes, comments and new followers on a user's content
into one reverse-chronological activity list
"""
import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roadtrippi.models import AttractionList, CheckIn, Comment, Follow, Like, LikeTargetType, ListComment
from roadtrippi.schemas.inbox import InboxItem, InboxItemType
from roadtrippi.schemas.user import UserSummary

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 100
SNIPPET_MARKER = "…"


def comment_snippet(text: str) -> str:
    if len(text) > SNIPPET_LENGTH:
        return text[:SNIPPET_LENGTH] + SNIPPET_MARKER
    return text


class InboxService:
    """Builds the social inbox for one user"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_inbox(self, user_id: int, limit: int) -> List[InboxItem]:
        """
        Activity by other users on the caller's check-ins and lists, newest first.

        Self-activity never appears. A user with no check-ins or lists gets
        only follow events (possibly none).

        Args:
            user_id: Caller id
            limit: Maximum number of items returned

        Returns:
            Up to ``limit`` items sorted by createdAt descending; ties keep
            the order review likes, list likes, review comments, list
            comments, follows
        """
        check_in_ids = await self._own_ids(CheckIn.id, CheckIn.user_id, user_id)
        list_ids = await self._own_ids(AttractionList.id, AttractionList.user_id, user_id)

        review_likes = await self._likes(LikeTargetType.REVIEW, check_in_ids, user_id)
        list_likes = await self._likes(LikeTargetType.LIST, list_ids, user_id)
        review_comments = await self._review_comments(check_in_ids, user_id)
        list_comments = await self._list_comments(list_ids, user_id)
        new_followers = await self._new_followers(user_id, limit)

        check_ins_by_id = await self._check_ins_with_attraction(
            {like.target_id for like in review_likes}
        )
        lists_by_id = await self._lists_by_id({like.target_id for like in list_likes})

        items: List[InboxItem] = []
        for like in review_likes + list_likes:
            items.append(self._like_item(like, check_ins_by_id, lists_by_id))
        for comment in review_comments:
            check_in = comment.check_in
            items.append(InboxItem(
                id=f"comment-review-{comment.id}",
                type=InboxItemType.COMMENT_REVIEW,
                actor=UserSummary.model_validate(comment.user),
                created_at=comment.created_at,
                check_in_id=comment.check_in_id,
                attraction_id=check_in.attraction.id if check_in else None,
                attraction_name=check_in.attraction.name if check_in else None,
                comment_snippet=comment_snippet(comment.text),
                rating=check_in.rating if check_in else None,
            ))
        for comment in list_comments:
            items.append(InboxItem(
                id=f"comment-list-{comment.id}",
                type=InboxItemType.COMMENT_LIST,
                actor=UserSummary.model_validate(comment.user),
                created_at=comment.created_at,
                list_id=comment.list_id,
                list_title=comment.list.title if comment.list else None,
                comment_snippet=comment_snippet(comment.text),
            ))
        for follow in new_followers:
            items.append(InboxItem(
                id=f"follow-{follow.follower_id}-{follow.following_id}",
                type=InboxItemType.FOLLOW,
                actor=UserSummary.model_validate(follow.follower),
                created_at=follow.created_at,
            ))

        items.sort(key=lambda item: item.created_at, reverse=True)
        logger.debug(
            "Inbox assembled",
            extra={'user_id': user_id, 'candidates': len(items), 'limit': limit}
        )
        return items[:limit]

    def _like_item(
        self,
        like: Like,
        check_ins_by_id: Dict[int, CheckIn],
        lists_by_id: Dict[int, AttractionList],
    ) -> InboxItem:
        target = like.target
        actor = UserSummary.model_validate(like.user)
        if target.type == LikeTargetType.REVIEW:
            check_in = check_ins_by_id.get(target.id)
            attraction = check_in.attraction if check_in else None
            return InboxItem(
                id=f"like-review-{like.id}",
                type=InboxItemType.LIKE_REVIEW,
                actor=actor,
                created_at=like.created_at,
                check_in_id=target.id,
                attraction_id=attraction.id if attraction else None,
                attraction_name=attraction.name if attraction else None,
            )
        elif target.type == LikeTargetType.LIST:
            liked_list = lists_by_id.get(target.id)
            return InboxItem(
                id=f"like-list-{like.id}",
                type=InboxItemType.LIKE_LIST,
                actor=actor,
                created_at=like.created_at,
                list_id=target.id,
                list_title=liked_list.title if liked_list else None,
            )
        else:
            raise ValueError(f"Unhandled like target type: {target.type}")

    async def _own_ids(self, id_column, owner_column, user_id: int) -> List[int]:
        result = await self.db.execute(select(id_column).where(owner_column == user_id))
        return list(result.scalars().all())

    async def _likes(self, target_type: LikeTargetType, target_ids: List[int], user_id: int) -> List[Like]:
        if not target_ids:
            return []
        stmt = (
            select(Like)
            .options(selectinload(Like.user))
            .where(
                Like.target_type == target_type,
                Like.target_id.in_(target_ids),
                Like.user_id != user_id,
            )
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def _review_comments(self, check_in_ids: List[int], user_id: int) -> List[Comment]:
        if not check_in_ids:
            return []
        stmt = (
            select(Comment)
            .options(
                selectinload(Comment.user),
                selectinload(Comment.check_in).selectinload(CheckIn.attraction),
            )
            .where(Comment.check_in_id.in_(check_in_ids), Comment.user_id != user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def _list_comments(self, list_ids: List[int], user_id: int) -> List[ListComment]:
        if not list_ids:
            return []
        stmt = (
            select(ListComment)
            .options(selectinload(ListComment.user), selectinload(ListComment.list))
            .where(ListComment.list_id.in_(list_ids), ListComment.user_id != user_id)
            .order_by(ListComment.created_at.desc(), ListComment.id.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def _new_followers(self, user_id: int, limit: int) -> List[Follow]:
        stmt = (
            select(Follow)
            .options(selectinload(Follow.follower))
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc())
            .limit(limit)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def _check_ins_with_attraction(self, check_in_ids: set) -> Dict[int, CheckIn]:
        if not check_in_ids:
            return {}
        stmt = (
            select(CheckIn)
            .options(selectinload(CheckIn.attraction))
            .where(CheckIn.id.in_(check_in_ids))
        )
        return {c.id: c for c in (await self.db.execute(stmt)).scalars().all()}

    async def _lists_by_id(self, list_ids: set) -> Dict[int, AttractionList]:
        if not list_ids:
            return {}
        stmt = select(AttractionList).where(AttractionList.id.in_(list_ids))
        return {lst.id: lst for lst in (await self.db.execute(stmt)).scalars().all()}
