"""Application state layer.

This package is the single source of truth for what the controller knows:
addresses, the resolved work coordinate, geofence presence, notification
permission and the latest traffic result. State only changes by applying
events to the reducer in :mod:`homerun.state.store`.
"""

from homerun.state.events import (
    AddressesEdited,
    AddressesSaved,
    AppEvent,
    CoordinateResolved,
    GeocodeFailed,
    GeofenceChanged,
    LocationFailed,
    MonitoringStarted,
    MonitoringStopped,
    NotificationPermissionChanged,
    TrafficCheckCompleted,
    TrafficCheckStarted,
)
from homerun.state.store import AppState, StateStore, reduce

__all__ = [
    "AddressesEdited",
    "AddressesSaved",
    "AppEvent",
    "AppState",
    "CoordinateResolved",
    "GeocodeFailed",
    "GeofenceChanged",
    "LocationFailed",
    "MonitoringStarted",
    "MonitoringStopped",
    "NotificationPermissionChanged",
    "StateStore",
    "TrafficCheckCompleted",
    "TrafficCheckStarted",
    "reduce",
]
