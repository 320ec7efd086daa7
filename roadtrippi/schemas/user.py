from datetime import datetime
from typing import Optional

from roadtrippi.schemas.base import CamelModel


class UserSummary(CamelModel):
    """Actor/author shape embedded in other responses"""
    id: int
    username: str
    avatar_url: Optional[str] = None


class UserProfileSummary(UserSummary):
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


class UserListResponse(CamelModel):
    items: list[UserProfileSummary]


class SocialCounts(CamelModel):
    followers_count: int
    following_count: int
    friends_count: int
