from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.check_in import CheckInSummary
from roadtrippi.schemas.user import UserProfileSummary


class UserProfile(UserProfileSummary):
    """Public profile: counts plus the most recent visits"""
    check_in_count: int = 0
    list_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    recent_check_ins: list[CheckInSummary] = []


class UserDirectoryEntry(UserProfileSummary):
    check_in_count: int = 0
    followers_count: int = 0


class UserPage(CamelModel):
    items: list[UserDirectoryEntry]
    total: int
    page: int
    limit: int
