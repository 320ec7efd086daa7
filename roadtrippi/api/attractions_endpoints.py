"""
Attraction API endpoints - listing, map, categories, nearby explore and detail
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roadtrippi.config import get_settings
from roadtrippi.core.db import get_db
from roadtrippi.core.exceptions import InvalidQueryError
from roadtrippi.core.metrics import record_latency
from roadtrippi.schemas.attraction import (
    AttractionDetail,
    AttractionPage,
    CategoryListResponse,
    MapResponse,
    NearbyResponse,
    SortBy,
    SortOrder,
)
from roadtrippi.services.attraction_query_service import AttractionQuery, AttractionQueryService

settings = get_settings()

router = APIRouter(prefix="/api/attractions", tags=["attractions"])


@router.get("", response_model=AttractionPage)
async def list_attractions(
    page: int = Query(1, ge=1),
    limit: int = Query(
        settings.query.attractions_default_limit, ge=1, le=settings.query.attractions_max_limit
    ),
    state: Optional[str] = Query(None, pattern=r"^(\s*|[A-Za-z]{2})$"),
    city: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None, max_length=100),
    sort_by: SortBy = Query(SortBy.NAME, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    db: AsyncSession = Depends(get_db),
):
    """
    Paginated attraction listing

    - **state** / **city** / **search** / **category**: optional filters (AND-combined)
    - **sortBy**: name, state, city, createdAt, visitCount, rating or distance
    - **lat** / **lng**: viewer location; required for distance sort, adds distanceMiles otherwise
    """
    query = AttractionQuery(
        page=page,
        limit=limit,
        state=state,
        city=city,
        search=search,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        viewer_lat=lat,
        viewer_lng=lng,
    )
    with record_latency(f"attractions.{sort_by.value}"):
        return await AttractionQueryService(db).list_attractions(query)


@router.get("/map", response_model=MapResponse)
async def get_map_points(db: AsyncSession = Depends(get_db)):
    """All geocoded attractions for the map view"""
    items = await AttractionQueryService(db).list_map_points()
    return MapResponse(items=items)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)):
    items = await AttractionQueryService(db).list_categories()
    return CategoryListResponse(items=items)


@router.get("/nearby/explore", response_model=NearbyResponse)
async def explore_nearby(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_miles: float = Query(
        settings.query.nearby_default_radius_miles, ge=1, le=500, alias="radiusMiles"
    ),
    limit: int = Query(
        settings.query.attractions_default_limit, ge=1, le=settings.query.attractions_max_limit
    ),
    db: AsyncSession = Depends(get_db),
):
    """
    Attractions within a radius of a point, closest first

    - **lat** / **lng**: required
    - **radiusMiles**: 1-500, default 50
    """
    if lat is None or lng is None:
        raise InvalidQueryError("lat and lng required for nearby")
    with record_latency("attractions.nearby"):
        items = await AttractionQueryService(db).explore_nearby(lat, lng, radius_miles, limit)
    return NearbyResponse(items=items)


@router.get("/{attraction_id}", response_model=AttractionDetail)
async def get_attraction(attraction_id: int, db: AsyncSession = Depends(get_db)):
    """Attraction detail with recent and popular check-ins"""
    return await AttractionQueryService(db).get_attraction_detail(attraction_id)
