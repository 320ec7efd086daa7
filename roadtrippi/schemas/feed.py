from datetime import date, datetime
from typing import Optional

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.user import UserSummary


class FeedAttraction(CamelModel):
    id: int
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    image_url: Optional[str] = None


class FeedItem(CamelModel):
    id: int
    rating: Optional[float] = None
    review: Optional[str] = None
    visit_date: date
    created_at: datetime
    user: UserSummary
    attraction: FeedAttraction
    like_count: int = 0
    liked_by_me: bool = False


class FeedResponse(CamelModel):
    items: list[FeedItem]
