"""
Inbox schemas: one flat item shape tagged by kind
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.user import UserSummary


class InboxItemType(str, Enum):
    LIKE_REVIEW = "like_review"
    LIKE_LIST = "like_list"
    COMMENT_REVIEW = "comment_review"
    COMMENT_LIST = "comment_list"
    FOLLOW = "follow"


class InboxItem(CamelModel):
    id: str
    type: InboxItemType
    actor: UserSummary
    created_at: datetime
    check_in_id: Optional[int] = None
    list_id: Optional[int] = None
    attraction_id: Optional[int] = None
    attraction_name: Optional[str] = None
    list_title: Optional[str] = None
    comment_snippet: Optional[str] = None
    rating: Optional[float] = None


class InboxResponse(CamelModel):
    items: list[InboxItem]
