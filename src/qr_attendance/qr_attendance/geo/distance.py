from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_KM
from .model import GeoPoint


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points using the haversine formula.

    Raises InvalidCoordinateError for NaN or out-of-range coordinates.
    """

    a.validate()
    b.validate()

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # Clamp rounding noise so asin stays in its domain.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * 1000.0 * math.asin(math.sqrt(h))
