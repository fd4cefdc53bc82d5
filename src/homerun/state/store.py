"""Deterministic application state store.

This is the only component allowed to fold events into the state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from homerun.geofence import GeofenceState
from homerun.models.address import AddressPair
from homerun.models.enums import GpsStatus, NotificationPermission
from homerun.models.location import Coordinate, LocationError
from homerun.models.traffic import TrafficError, TrafficReport
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
from homerun.state.policy import is_traffic_loading, should_accept_traffic_result

_logger = logging.getLogger(__name__)

StateListener = Callable[["AppState", AppEvent], None]


class AppState(BaseModel):
    """Immutable snapshot of everything the controller knows."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    addresses: AddressPair = AddressPair()
    work_coordinate: Coordinate | None = None
    geocode_error: str | None = None
    monitoring: bool = False
    geofence: GeofenceState = GeofenceState()
    last_location_error: LocationError | None = None
    notification_permission: NotificationPermission = NotificationPermission.DEFAULT
    traffic: TrafficReport | TrafficError | None = None
    traffic_sequence: int = 0
    traffic_completed_sequence: int = 0

    @property
    def gps_status(self) -> GpsStatus:
        return self.geofence.status

    @property
    def traffic_loading(self) -> bool:
        return is_traffic_loading(
            completed_sequence=self.traffic_completed_sequence,
            latest_sequence=self.traffic_sequence,
        )

    @property
    def notifications_enabled(self) -> bool:
        return self.notification_permission == NotificationPermission.GRANTED


def reduce(state: AppState, event: AppEvent) -> AppState:
    """Return the state that results from applying *event* to *state*."""
    if isinstance(event, (AddressesEdited, AddressesSaved)):
        # Editing or saving never touches the coordinate; only a successful
        # geocode replaces it.
        return state.model_copy(update={"addresses": event.addresses})

    if isinstance(event, CoordinateResolved):
        return state.model_copy(update={"work_coordinate": event.coordinate, "geocode_error": None})

    if isinstance(event, GeocodeFailed):
        return state.model_copy(update={"geocode_error": event.error})

    if isinstance(event, MonitoringStarted):
        return state.model_copy(update={"monitoring": True})

    if isinstance(event, MonitoringStopped):
        # The edge flag survives a stop so a restart does not miss a departure.
        geofence = state.geofence.model_copy(update={"status": GpsStatus.IDLE})
        return state.model_copy(update={"monitoring": False, "geofence": geofence})

    if isinstance(event, GeofenceChanged):
        return state.model_copy(update={"geofence": event.geofence})

    if isinstance(event, LocationFailed):
        # Presence is left exactly as it was.
        return state.model_copy(update={"last_location_error": event.error})

    if isinstance(event, NotificationPermissionChanged):
        return state.model_copy(update={"notification_permission": event.permission})

    if isinstance(event, TrafficCheckStarted):
        if event.sequence <= state.traffic_sequence:
            return state
        # The previous result is cleared while the new check is loading.
        return state.model_copy(update={"traffic_sequence": event.sequence, "traffic": None})

    if isinstance(event, TrafficCheckCompleted):
        if not should_accept_traffic_result(sequence=event.sequence, latest_sequence=state.traffic_sequence):
            return state
        return state.model_copy(
            update={
                "traffic": event.result,
                "traffic_sequence": max(state.traffic_sequence, event.sequence),
                "traffic_completed_sequence": event.sequence,
            }
        )

    raise TypeError(f"Unsupported event type: {type(event).__name__}")


class StateStore:
    """Holds the current :class:`AppState` and notifies listeners on change.

    Given the same sequence of events the store always produces the same
    snapshots.
    """

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial or AppState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def apply(self, event: AppEvent) -> AppState:
        """Apply *event*; listeners run unless the event was discarded."""
        previous = self._state
        self._state = reduce(previous, event)
        if self._state is not previous:
            for listener in list(self._listeners):
                try:
                    listener(self._state, event)
                except Exception:
                    _logger.debug("State listener failed", exc_info=True)
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
