from datetime import date, datetime
from typing import Optional

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.feed import FeedAttraction


class CheckInSummary(CamelModel):
    """A user's own check-in with the attraction it points at"""
    id: int
    attraction_id: int
    rating: Optional[float] = None
    review: Optional[str] = None
    visit_date: date
    created_at: datetime
    attraction: FeedAttraction


class CheckInListResponse(CamelModel):
    items: list[CheckInSummary]
