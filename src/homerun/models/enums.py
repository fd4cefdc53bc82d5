"""State enums shared across homerun."""

from __future__ import annotations

import enum
from enum import StrEnum


class PresenceState(StrEnum):
    """Where the user is relative to the work geofence."""

    UNKNOWN = "unknown"
    AT_WORK = "at_work"
    AWAY = "away"


class GpsStatus(StrEnum):
    """Observable monitoring status."""

    IDLE = "idle"
    AT_WORK = "at_work"
    LEFT_WORK = "left_work"


class GeofenceEvent(StrEnum):
    """Edge-triggered geofence transitions."""

    ARRIVED = "arrived"
    DEPARTED = "departed"


class TrafficClassification(StrEnum):
    TRAFFIC = "traffic_detected"
    CLEAR = "road_clear"


class NotificationPermission(StrEnum):
    """Tri-state notification permission owned by the platform."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class LocationErrorCode(enum.IntEnum):
    """Location provider error codes (W3C Geolocation numbering).

    Codes without a mapped member resolve to ``UNKNOWN``.
    """

    UNKNOWN = -1
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3

    @classmethod
    def _missing_(cls, value: object) -> LocationErrorCode:
        return cls.UNKNOWN
