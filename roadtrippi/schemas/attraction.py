"""
Attraction schemas for listing, detail, map and nearby responses
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.user import UserSummary


class SortBy(str, Enum):
    NAME = "name"
    STATE = "state"
    CITY = "city"
    CREATED_AT = "createdAt"
    VISIT_COUNT = "visitCount"
    RATING = "rating"
    DISTANCE = "distance"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CategoryRead(CamelModel):
    id: int
    name: str
    slug: str
    icon: Optional[str] = None


class AttractionRead(CamelModel):
    """Attraction enriched with derived stats; distance only when the viewer is located."""
    id: int
    name: str
    description: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    visit_count: int = 0
    avg_rating: Optional[float] = None
    rating_count: int = 0
    categories: list[CategoryRead] = []
    distance_miles: Optional[float] = None


class AttractionPage(CamelModel):
    items: list[AttractionRead]
    total: int
    page: int
    limit: int


class MapPoint(CamelModel):
    id: int
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: float
    longitude: float
    image_url: Optional[str] = None
    source_url: Optional[str] = None


class MapResponse(CamelModel):
    items: list[MapPoint]


class CategoryListResponse(CamelModel):
    items: list[CategoryRead]


class NearbyResponse(CamelModel):
    items: list[AttractionRead]


class CheckInWithLikes(CamelModel):
    id: int
    user_id: int
    attraction_id: int
    rating: Optional[float] = None
    review: Optional[str] = None
    visit_date: date
    created_at: datetime
    user: UserSummary
    like_count: int = 0


class AttractionDetail(AttractionRead):
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    recent_check_ins: list[CheckInWithLikes] = Field(default_factory=list)
    popular_check_ins: list[CheckInWithLikes] = Field(default_factory=list)
