"""
SQLAlchemy models for the Roadtrippi entity store.

Importing this package registers every table on ``Base.metadata``.
"""

from .user import User
from .attraction import Attraction, AttractionCategory, Category
from .check_in import CheckIn, Comment
from .attraction_list import AttractionList, ListItem, ListComment
from .follow import Follow
from .like import Like, LikeTarget, LikeTargetType

__all__ = [
    "User",
    "Attraction",
    "AttractionCategory",
    "Category",
    "CheckIn",
    "Comment",
    "AttractionList",
    "ListItem",
    "ListComment",
    "Follow",
    "Like",
    "LikeTarget",
    "LikeTargetType",
]
