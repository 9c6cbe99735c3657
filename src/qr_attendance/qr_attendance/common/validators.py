from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError
from ..geo.model import GeoPoint


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def parse_location(data: Any) -> Optional[GeoPoint]:
    """Read ``{"lat": .., "lng": ..}`` (or latitude/longitude) into a GeoPoint.

    Missing or empty input means "location unavailable" and returns None.
    """

    if data in (None, "", {}):
        return None
    if not isinstance(data, dict):
        raise ValidationError("location must be an object with lat/lng")

    lat = data.get("lat", data.get("latitude"))
    lng = data.get("lng", data.get("longitude"))
    if lat in (None, "") and lng in (None, ""):
        return None
    try:
        return GeoPoint.of(float(lat), float(lng))
    except (TypeError, ValueError):
        raise ValidationError("location lat/lng must be numbers")
