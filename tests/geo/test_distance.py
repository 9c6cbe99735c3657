import math

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import InvalidCoordinateError
from src.qr_attendance.qr_attendance.geo.distance import distance_meters
from src.qr_attendance.qr_attendance.geo.model import GeoPoint

BANGALORE = GeoPoint(12.9716, 77.5946)


def test_distance_to_self_is_zero():
    assert distance_meters(BANGALORE, BANGALORE) == 0.0


@pytest.mark.parametrize(
    "a, b",
    [
        (GeoPoint(12.9716, 77.5946), GeoPoint(12.9761, 77.5946)),
        (GeoPoint(-33.8688, 151.2093), GeoPoint(51.5074, -0.1278)),
        (GeoPoint(0.0, 179.9), GeoPoint(0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))


def test_one_millidegree_of_latitude_is_about_111_meters():
    north = GeoPoint(12.9726, 77.5946)
    # 6371 km * pi / 180 / 1000
    expected = 6371000 * math.pi / 180 / 1000
    assert distance_meters(BANGALORE, north) == pytest.approx(expected, abs=0.5)


def test_distance_across_antimeridian_is_short():
    assert distance_meters(GeoPoint(0.0, 179.9995), GeoPoint(0.0, -179.9995)) == pytest.approx(111.2, abs=0.5)


@pytest.mark.parametrize(
    "lat, lng",
    [(float("nan"), 0.0), (0.0, float("inf")), (90.5, 0.0), (0.0, -180.5)],
)
def test_invalid_coordinates_are_rejected(lat, lng):
    with pytest.raises(InvalidCoordinateError):
        distance_meters(GeoPoint(lat, lng), BANGALORE)

    with pytest.raises(InvalidCoordinateError):
        GeoPoint.of(lat, lng)
