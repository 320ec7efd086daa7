"""
Attraction Query Service - paginated listing, detail, map, categories and nearby explore
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roadtrippi.config import get_settings
from roadtrippi.core.exceptions import InvalidQueryError, NotFoundError
from roadtrippi.models import Attraction, Category, CheckIn
from roadtrippi.schemas.attraction import (
    AttractionDetail,
    AttractionPage,
    AttractionRead,
    CategoryRead,
    CheckInWithLikes,
    MapPoint,
    SortBy,
    SortOrder,
)
from roadtrippi.schemas.user import UserSummary
from roadtrippi.services.address import resolve_city_state
from roadtrippi.services.attraction_stats import (
    RatingStats,
    build_attraction_read,
    fetch_rating_stats,
    fetch_review_like_counts,
    fetch_visit_counts,
)
from roadtrippi.services.geo import bounding_box, haversine_miles

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 24


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class AttractionQuery:
    """Filter, sort and paging parameters for one listing request."""
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    state: Optional[str] = None
    city: Optional[str] = None
    search: Optional[str] = None
    category: Optional[str] = None
    sort_by: SortBy = SortBy.NAME
    sort_order: SortOrder = SortOrder.ASC
    viewer_lat: Optional[float] = None
    viewer_lng: Optional[float] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def descending(self) -> bool:
        return self.sort_order == SortOrder.DESC

    @property
    def has_viewer_location(self) -> bool:
        return (
            self.viewer_lat is not None
            and self.viewer_lng is not None
            and math.isfinite(self.viewer_lat)
            and math.isfinite(self.viewer_lng)
        )

    def filter_conditions(self) -> list:
        conditions = []
        state = _clean(self.state)
        if state:
            conditions.append(Attraction.state == state)
        city = _clean(self.city)
        if city:
            conditions.append(Attraction.city.icontains(city, autoescape=True))
        search = _clean(self.search)
        if search:
            conditions.append(Attraction.name.icontains(search, autoescape=True))
        category = _clean(self.category)
        if category:
            conditions.append(Attraction.categories.any(Category.slug == category))
        return conditions


_COLUMN_SORTS = {
    SortBy.NAME: Attraction.name,
    SortBy.STATE: Attraction.state,
    SortBy.CITY: Attraction.city,
    SortBy.CREATED_AT: Attraction.created_at,
}


class AttractionQueryService:
    """Read models over the attraction catalogue"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.query_settings = get_settings().query

    async def list_attractions(self, query: AttractionQuery) -> AttractionPage:
        """
        Return one page of filtered, sorted, enriched attractions.

        Column sorts page in the store. Rating and distance are derived, so the
        whole filtered id set is ranked first and only the page is fetched.

        Raises:
            InvalidQueryError: distance sort without finite viewer coordinates
        """
        logger.debug(
            "Attraction query",
            extra={
                'sort_by': query.sort_by.value,
                'sort_order': query.sort_order.value,
                'page': query.page,
                'limit': query.limit,
            }
        )

        if query.sort_by == SortBy.DISTANCE:
            if not query.has_viewer_location:
                logger.warning("Distance sort requested without viewer location")
                raise InvalidQueryError(
                    "lat and lng required when sortBy is distance",
                    details={'sort_by': query.sort_by.value},
                )
            return await self._list_by_distance(query)
        if query.sort_by == SortBy.RATING:
            return await self._list_by_rating(query)
        return await self._list_by_column(query)

    async def _list_by_column(self, query: AttractionQuery) -> AttractionPage:
        conditions = query.filter_conditions()

        stmt = select(Attraction).where(*conditions)
        if query.sort_by == SortBy.VISIT_COUNT:
            visits = (
                select(CheckIn.attraction_id, func.count(CheckIn.id).label("visit_count"))
                .group_by(CheckIn.attraction_id)
                .subquery()
            )
            stmt = stmt.outerjoin(visits, visits.c.attraction_id == Attraction.id)
            sort_column = func.coalesce(visits.c.visit_count, 0)
        else:
            sort_column = _COLUMN_SORTS[query.sort_by]

        order = sort_column.desc() if query.descending else sort_column.asc()
        stmt = stmt.order_by(order, Attraction.id.asc()).offset(query.offset).limit(query.limit)

        attractions = list((await self.db.execute(stmt)).scalars().all())
        total = await self._count(conditions)
        items = await self._enrich(attractions, query)
        return AttractionPage(items=items, total=total, page=query.page, limit=query.limit)

    async def _list_by_rating(self, query: AttractionQuery) -> AttractionPage:
        conditions = query.filter_conditions()
        id_stmt = select(Attraction.id).where(*conditions).order_by(Attraction.id)
        all_ids = list((await self.db.execute(id_stmt)).scalars().all())

        stats = await fetch_rating_stats(self.db, select(Attraction.id).where(*conditions))
        # Unrated attractions rank with key 0; sorted() is stable for reverse too
        ranked = sorted(
            all_ids,
            key=lambda attraction_id: stats[attraction_id].avg if attraction_id in stats else 0.0,
            reverse=query.descending,
        )
        page_ids = ranked[query.offset:query.offset + query.limit]
        attractions = await self._fetch_in_order(page_ids)
        items = await self._enrich(attractions, query, rating_stats=stats)
        return AttractionPage(items=items, total=len(all_ids), page=query.page, limit=query.limit)

    async def _list_by_distance(self, query: AttractionQuery) -> AttractionPage:
        conditions = query.filter_conditions()
        stmt = (
            select(Attraction.id, Attraction.latitude, Attraction.longitude)
            .where(*conditions, Attraction.latitude.is_not(None), Attraction.longitude.is_not(None))
            .order_by(Attraction.id)
        )
        rows = (await self.db.execute(stmt)).all()
        distances = {
            attraction_id: haversine_miles(query.viewer_lat, query.viewer_lng, lat, lng)
            for attraction_id, lat, lng in rows
        }
        ranked = sorted(distances, key=distances.__getitem__, reverse=query.descending)
        page_ids = ranked[query.offset:query.offset + query.limit]
        attractions = await self._fetch_in_order(page_ids)
        items = await self._enrich(attractions, query)
        return AttractionPage(items=items, total=len(ranked), page=query.page, limit=query.limit)

    async def _count(self, conditions: list) -> int:
        stmt = select(func.count()).select_from(Attraction).where(*conditions)
        return (await self.db.execute(stmt)).scalar_one()

    async def _fetch_in_order(self, ids: Sequence[int]) -> List[Attraction]:
        """Fetch full rows for ``ids`` and restore the given order."""
        if not ids:
            return []
        result = await self.db.execute(select(Attraction).where(Attraction.id.in_(ids)))
        by_id = {attraction.id: attraction for attraction in result.scalars().all()}
        return [by_id[attraction_id] for attraction_id in ids if attraction_id in by_id]

    async def _enrich(
        self,
        attractions: List[Attraction],
        query: AttractionQuery,
        rating_stats: Optional[Dict[int, RatingStats]] = None,
    ) -> List[AttractionRead]:
        ids = [a.id for a in attractions]
        visit_counts = await fetch_visit_counts(self.db, ids)
        if rating_stats is None:
            rating_stats = await fetch_rating_stats(self.db, ids)

        items = []
        for attraction in attractions:
            distance = None
            if query.has_viewer_location and attraction.has_coordinates:
                distance = haversine_miles(
                    query.viewer_lat, query.viewer_lng, attraction.latitude, attraction.longitude
                )
            items.append(build_attraction_read(
                attraction,
                visit_count=visit_counts.get(attraction.id, 0),
                rating=rating_stats.get(attraction.id),
                distance_miles=distance,
            ))
        return items

    async def get_attraction_detail(self, attraction_id: int) -> AttractionDetail:
        """
        Attraction with derived stats plus its most recent check-ins.

        Raises:
            NotFoundError: unknown attraction id
        """
        attraction = await self.db.get(Attraction, attraction_id)
        if attraction is None:
            raise NotFoundError("Attraction", attraction_id)

        stmt = (
            select(CheckIn)
            .options(selectinload(CheckIn.user))
            .where(CheckIn.attraction_id == attraction_id)
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
            .limit(self.query_settings.detail_check_in_window)
        )
        check_ins = list((await self.db.execute(stmt)).scalars().all())
        like_counts = await fetch_review_like_counts(self.db, [c.id for c in check_ins])

        with_likes = [
            CheckInWithLikes(
                id=c.id,
                user_id=c.user_id,
                attraction_id=c.attraction_id,
                rating=c.rating,
                review=c.review,
                visit_date=c.visit_date,
                created_at=c.created_at,
                user=UserSummary.model_validate(c.user),
                like_count=like_counts.get(c.id, 0),
            )
            for c in check_ins
        ]
        display = self.query_settings.detail_check_in_display
        popular = sorted(with_likes, key=lambda c: c.like_count, reverse=True)

        visit_counts = await fetch_visit_counts(self.db, [attraction_id])
        rating_stats = await fetch_rating_stats(self.db, [attraction_id])
        base = build_attraction_read(
            attraction,
            visit_count=visit_counts.get(attraction_id, 0),
            rating=rating_stats.get(attraction_id),
        )
        return AttractionDetail(
            **base.model_dump(),
            address=attraction.address,
            created_at=attraction.created_at,
            recent_check_ins=with_likes[:display],
            popular_check_ins=popular[:display],
        )

    async def list_map_points(self) -> List[MapPoint]:
        """Every geocoded attraction with display city/state."""
        stmt = (
            select(
                Attraction.id,
                Attraction.name,
                Attraction.city,
                Attraction.state,
                Attraction.address,
                Attraction.latitude,
                Attraction.longitude,
                Attraction.image_url,
                Attraction.source_url,
            )
            .where(Attraction.latitude.is_not(None), Attraction.longitude.is_not(None))
            .order_by(Attraction.id)
        )
        points = []
        for row in (await self.db.execute(stmt)).all():
            city, state = resolve_city_state(row.city, row.state, row.address)
            points.append(MapPoint(
                id=row.id,
                name=row.name,
                city=city,
                state=state,
                latitude=row.latitude,
                longitude=row.longitude,
                image_url=row.image_url,
                source_url=row.source_url,
            ))
        return points

    async def list_categories(self) -> List[CategoryRead]:
        result = await self.db.execute(select(Category).order_by(Category.name, Category.id))
        return [CategoryRead.model_validate(c) for c in result.scalars().all()]

    async def explore_nearby(
        self,
        lat: float,
        lng: float,
        radius_miles: float,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[AttractionRead]:
        """
        Attractions within ``radius_miles`` of a point, closest first.

        Raises:
            InvalidQueryError: non-finite coordinates
        """
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise InvalidQueryError("lat and lng required for nearby")

        min_lat, max_lat, min_lng, max_lng = bounding_box(lat, lng, radius_miles)
        stmt = (
            select(Attraction)
            .where(
                Attraction.latitude.between(min_lat, max_lat),
                Attraction.longitude.between(min_lng, max_lng),
            )
            .order_by(Attraction.id)
        )
        candidates = (await self.db.execute(stmt)).scalars().all()

        within = []
        for attraction in candidates:
            distance = haversine_miles(lat, lng, attraction.latitude, attraction.longitude)
            if distance <= radius_miles:
                within.append((distance, attraction))
        within.sort(key=lambda pair: pair[0])
        within = within[:limit]

        ids = [a.id for _, a in within]
        visit_counts = await fetch_visit_counts(self.db, ids)
        rating_stats = await fetch_rating_stats(self.db, ids)
        return [
            build_attraction_read(
                attraction,
                visit_count=visit_counts.get(attraction.id, 0),
                rating=rating_stats.get(attraction.id),
                distance_miles=distance,
            )
            for distance, attraction in within
        ]
