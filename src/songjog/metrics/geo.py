"""Great-circle distance between a user and an event."""

import math
from typing import Optional

from songjog.events.event_models import Coordinates

EARTH_RADIUS_KM = 6371.0088

# Radius options offered by the listing's distance filter
DISTANCE_OPTIONS_KM = {
    "5km": 5.0,
    "10km": 10.0,
    "15km": 15.0,
}


def haversine_km(origin: Coordinates, target: Coordinates) -> float:
    lat1, lng1 = math.radians(origin.lat), math.radians(origin.lng)
    lat2, lng2 = math.radians(target.lat), math.radians(target.lng)
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def parse_distance_option(value: Optional[str]) -> Optional[float]:
    """'10km' -> 10.0. 'any', empty and unrecognised values -> None (no radius)."""
    if not value:
        return None
    return DISTANCE_OPTIONS_KM.get(value.strip().lower())
