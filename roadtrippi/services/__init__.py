# Business logic services

from .attraction_query_service import AttractionQuery, AttractionQueryService
from .inbox_service import InboxService
from .social_service import SocialService
from .list_service import ListService
from .check_in_service import CheckInService
from .user_service import UserService
from .address import parse_city_state_from_address, resolve_city_state
from .geo import haversine_miles, EARTH_RADIUS_MILES

__all__ = [
    "AttractionQuery",
    "AttractionQueryService",
    "InboxService",
    "SocialService",
    "ListService",
    "CheckInService",
    "UserService",
    "parse_city_state_from_address",
    "resolve_city_state",
    "haversine_miles",
    "EARTH_RADIUS_MILES",
]
