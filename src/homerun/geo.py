"""Great-circle distance helpers."""

from __future__ import annotations

import math

from homerun._constants import EARTH_RADIUS_M
from homerun.models.location import Coordinate


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    return haversine_meters(a.lat, a.lng, b.lat, b.lng)


def offset_north(origin: Coordinate, meters: float) -> Coordinate:
    """Coordinate *meters* due north of *origin* (pure latitude offset)."""
    dlat = math.degrees(meters / EARTH_RADIUS_M)
    return Coordinate(lat=origin.lat + dlat, lng=origin.lng)
