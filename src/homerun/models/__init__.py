"""Typed models for homerun."""

from homerun.models.address import AddressPair
from homerun.models.enums import (
    GeofenceEvent,
    GpsStatus,
    LocationErrorCode,
    NotificationPermission,
    PresenceState,
    TrafficClassification,
)
from homerun.models.location import Coordinate, LocationError, LocationSample
from homerun.models.traffic import (
    RouteDurations,
    TrafficError,
    TrafficReport,
    TrafficResult,
    classify_delay,
)

__all__ = [
    "AddressPair",
    "Coordinate",
    "GeofenceEvent",
    "GpsStatus",
    "LocationError",
    "LocationErrorCode",
    "LocationSample",
    "NotificationPermission",
    "PresenceState",
    "RouteDurations",
    "TrafficClassification",
    "TrafficError",
    "TrafficReport",
    "TrafficResult",
    "classify_delay",
]
