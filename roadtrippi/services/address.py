"""
City/state resolution for attractions.

Stored columns are authoritative; the free-text address is only consulted to
fill whichever of city/state is missing (or the "US" placeholder state).
"""
import re
from typing import Optional, Tuple

_DIRECTIONS_SUFFIX = re.compile(r"Directions.*$", re.IGNORECASE)
_STATE_CODE = re.compile(r"[A-Za-z]{2}")

PLACEHOLDER_STATE = "US"


def parse_city_state_from_address(address: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Parse a trailing "City, ST" out of a US-style address.

    "1 Court Square, Andalusia, ALDirections: ..." -> ("Andalusia", "AL")

    Returns (None, None) when no two-letter segment follows another segment.
    """
    if not address or not isinstance(address, str):
        return None, None

    parts = [segment.strip() for segment in address.strip().split(",")]
    parts = [segment for segment in parts if segment]

    for i in range(len(parts) - 1, 0, -1):
        part = _DIRECTIONS_SUFFIX.sub("", parts[i]).strip()
        if _STATE_CODE.fullmatch(part):
            return parts[i - 1] or None, part.upper()
    return None, None


def resolve_city_state(
    city: Optional[str],
    state: Optional[str],
    address: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    """Display city/state: stored values when usable, parsed address otherwise."""
    has_city = city is not None and city.strip() != ""
    has_state = state is not None and state.strip() != "" and state != PLACEHOLDER_STATE
    if has_city and has_state:
        return city, state

    parsed_city, parsed_state = parse_city_state_from_address(address)
    return (
        city if has_city else parsed_city,
        state if has_state else parsed_state,
    )
