from __future__ import annotations

import math
from typing import NamedTuple

EARTH_RADIUS = {"km": 6371.0, "mi": 3959.0}


class GeoCoordinate(NamedTuple):
    latitude: float
    longitude: float


def _finite(*coords: GeoCoordinate) -> bool:
    return all(math.isfinite(float(c.latitude)) and math.isfinite(float(c.longitude)) for c in coords)


def distance(a: GeoCoordinate, b: GeoCoordinate, unit: str = "km") -> float:
    """
    Great-circle (haversine) distance between two coordinates.

    Units:
    - "km": Earth radius 6371 km
    - "mi": Earth radius 3959 mi

    Non-finite inputs yield NaN instead of raising.
    """

    try:
        radius = EARTH_RADIUS[unit]
    except KeyError:
        raise ValueError(f"Unsupported distance unit: {unit!r}") from None
    if not _finite(a, b):
        return math.nan

    lat1 = math.radians(float(a.latitude))
    lat2 = math.radians(float(b.latitude))
    d_lat = lat2 - lat1
    d_lon = math.radians(float(b.longitude) - float(a.longitude))
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return float(radius * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h)))


def azimuth(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Initial bearing from `a` to `b`, degrees clockwise from north in [0, 360)."""

    if not _finite(a, b):
        return math.nan

    lat1 = math.radians(float(a.latitude))
    lat2 = math.radians(float(b.latitude))
    d_lon = math.radians(float(b.longitude) - float(a.longitude))
    if lat1 == lat2 and d_lon == 0.0:
        return 0.0
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    bearing = math.degrees(math.atan2(y, x)) % 360.0
    # Tiny negative angles wrap to exactly 360.0 in float arithmetic.
    if bearing >= 360.0:
        return 0.0
    return float(bearing)
