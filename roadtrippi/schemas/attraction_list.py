from datetime import datetime
from typing import Optional

from roadtrippi.schemas.base import CamelModel
from roadtrippi.schemas.attraction import AttractionRead


class ListItemRead(CamelModel):
    id: int
    attraction_id: int
    position: int
    notes: Optional[str] = None
    attraction: AttractionRead


class ListDetail(CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    public: bool
    created_at: datetime
    items: list[ListItemRead]
    like_count: int = 0
    liked_by_me: bool = False


class ListSummary(CamelModel):
    """List header with its item count, no attractions"""
    id: int
    title: str
    description: Optional[str] = None
    public: bool
    created_at: datetime
    item_count: int = 0


class ListSummaryResponse(CamelModel):
    items: list[ListSummary]
