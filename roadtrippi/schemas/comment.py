from datetime import datetime

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.user import UserSummary


class CommentRead(CamelModel):
    """Comment on a check-in review or a list, oldest first in threads"""
    id: int
    text: str
    created_at: datetime
    user: UserSummary


class CommentListResponse(CamelModel):
    items: list[CommentRead]
