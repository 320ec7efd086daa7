"""
Derived attraction statistics and the shared enrichment step.

Visit counts and rating averages are never stored; every read recomputes
them from check-ins.
"""
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Union

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.models import Attraction, CheckIn, Like, LikeTargetType
from roadtrippi.schemas.attraction import AttractionRead, CategoryRead
from roadtrippi.services.address import resolve_city_state


@dataclass(frozen=True)
class RatingStats:
    avg: float
    count: int


def round_rating(avg: float) -> float:
    """Round half-up to one decimal place (4.25 -> 4.3)."""
    return math.floor(avg * 10 + 0.5) / 10


async def fetch_rating_stats(
    db: AsyncSession,
    attraction_ids: Union[Iterable[int], Select],
) -> Dict[int, RatingStats]:
    """
    Rounded average and count of non-null ratings per attraction.

    ``attraction_ids`` may be a concrete id collection or a select of ids.
    Attractions without a rated check-in are absent from the result.
    """
    if not isinstance(attraction_ids, Select):
        attraction_ids = list(attraction_ids)
        if not attraction_ids:
            return {}

    stmt = (
        select(CheckIn.attraction_id, func.avg(CheckIn.rating), func.count(CheckIn.id))
        .where(CheckIn.attraction_id.in_(attraction_ids), CheckIn.rating.is_not(None))
        .group_by(CheckIn.attraction_id)
    )
    result = await db.execute(stmt)
    return {
        attraction_id: RatingStats(avg=round_rating(float(avg)), count=count)
        for attraction_id, avg, count in result.all()
    }


async def fetch_visit_counts(db: AsyncSession, attraction_ids: Iterable[int]) -> Dict[int, int]:
    ids = list(attraction_ids)
    if not ids:
        return {}
    stmt = (
        select(CheckIn.attraction_id, func.count(CheckIn.id))
        .where(CheckIn.attraction_id.in_(ids))
        .group_by(CheckIn.attraction_id)
    )
    result = await db.execute(stmt)
    return {attraction_id: count for attraction_id, count in result.all()}


async def fetch_review_like_counts(db: AsyncSession, check_in_ids: Iterable[int]) -> Dict[int, int]:
    ids = list(check_in_ids)
    if not ids:
        return {}
    stmt = (
        select(Like.target_id, func.count(Like.id))
        .where(Like.target_type == LikeTargetType.REVIEW, Like.target_id.in_(ids))
        .group_by(Like.target_id)
    )
    result = await db.execute(stmt)
    return {target_id: count for target_id, count in result.all()}


def sorted_categories(attraction: Attraction) -> list[CategoryRead]:
    categories = sorted(attraction.categories, key=lambda c: (c.name.casefold(), c.name))
    return [CategoryRead.model_validate(c) for c in categories]


def build_attraction_read(
    attraction: Attraction,
    visit_count: int,
    rating: Optional[RatingStats],
    distance_miles: Optional[float] = None,
) -> AttractionRead:
    """Assemble the enriched attraction; unrated ones show avgRating null and ratingCount 0."""
    city, state = resolve_city_state(attraction.city, attraction.state, attraction.address)
    return AttractionRead(
        id=attraction.id,
        name=attraction.name,
        description=attraction.description,
        city=city,
        state=state,
        latitude=attraction.latitude,
        longitude=attraction.longitude,
        image_url=attraction.image_url,
        source_url=attraction.source_url,
        visit_count=visit_count,
        avg_rating=rating.avg if rating else None,
        rating_count=rating.count if rating else 0,
        categories=sorted_categories(attraction),
        distance_miles=distance_miles,
    )
