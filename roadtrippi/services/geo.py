"""Great-circle helpers (miles)."""
import math
from typing import Tuple

EARTH_RADIUS_MILES = 3959.0
MILES_PER_DEGREE_LAT = 69.0


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2)
        * math.sin(d_lng / 2)
    )
    # Rounding can push a past 1 for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def bounding_box(lat: float, lng: float, radius_miles: float) -> Tuple[float, float, float, float]:
    """Coarse (min_lat, max_lat, min_lng, max_lng) prefilter around a point."""
    d_lat = radius_miles / MILES_PER_DEGREE_LAT
    d_lng = radius_miles / (MILES_PER_DEGREE_LAT * math.cos(math.radians(lat)))
    d_lng = abs(d_lng)
    return lat - d_lat, lat + d_lat, lng - d_lng, lng + d_lng
