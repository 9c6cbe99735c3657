from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.exceptions import InvalidCoordinateError


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees (WGS84)."""

    latitude: float
    longitude: float

    @classmethod
    def of(cls, latitude: float, longitude: float) -> "GeoPoint":
        point = cls(float(latitude), float(longitude))
        point.validate()
        return point

    def validate(self) -> None:
        lat, lng = self.latitude, self.longitude
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise InvalidCoordinateError(f"Coordinates must be finite numbers, got ({lat}, {lng})")
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinateError(f"Latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise InvalidCoordinateError(f"Longitude out of range: {lng}")

    def to_dict(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}
