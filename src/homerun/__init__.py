"""homerun - Async commute watcher: work geofence departures and traffic alerts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("homerun")
except PackageNotFoundError:
    __version__ = "0+local"
from homerun.client import HomeRunClient
from homerun.config import HomeRunConfig
from homerun.exceptions import (
    GeocodeError,
    HomeRunApiError,
    HomeRunConfigError,
    HomeRunError,
    HomeRunStorageError,
    HomeRunTransportError,
    LocationUnsupportedError,
    MissingAddressError,
    MissingCoordinateError,
    PreconditionError,
    RouteError,
)
from homerun.geofence import GeofenceMonitor, GeofenceState
from homerun.location import LocationProvider, LocationSubscription, QueueLocationProvider
from homerun.models import (
    AddressPair,
    Coordinate,
    GeofenceEvent,
    GpsStatus,
    LocationError,
    LocationErrorCode,
    LocationSample,
    NotificationPermission,
    PresenceState,
    TrafficClassification,
    TrafficError,
    TrafficReport,
    TrafficResult,
)
from homerun.notify import LogNotificationSink, NotificationSink, Notifier, WebhookNotificationSink
from homerun.state import AppState
from homerun.store import AddressStore, JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "__version__",
    "AddressPair",
    "AddressStore",
    "AppState",
    "Coordinate",
    "GeocodeError",
    "GeofenceEvent",
    "GeofenceMonitor",
    "GeofenceState",
    "GpsStatus",
    "HomeRunApiError",
    "HomeRunClient",
    "HomeRunConfig",
    "HomeRunConfigError",
    "HomeRunError",
    "HomeRunStorageError",
    "HomeRunTransportError",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LocationError",
    "LocationErrorCode",
    "LocationProvider",
    "LocationSample",
    "LocationSubscription",
    "LocationUnsupportedError",
    "LogNotificationSink",
    "MemoryKeyValueStore",
    "MissingAddressError",
    "MissingCoordinateError",
    "NotificationPermission",
    "NotificationSink",
    "Notifier",
    "PreconditionError",
    "PresenceState",
    "QueueLocationProvider",
    "RouteError",
    "TrafficClassification",
    "TrafficError",
    "TrafficReport",
    "TrafficResult",
    "WebhookNotificationSink",
]
