"""Work geofence: edge-triggered arrival/departure detection.

The transition logic is a pure function of the previous
:class:`GeofenceState` and the distance of a new sample to the work
coordinate. :class:`GeofenceMonitor` only binds it to a coordinate and a
radius.

Departure fires exactly once per arrival/departure cycle: ticks outside
the radius while the edge flag is already clear change nothing, including
the very first ticks before the user was ever seen at work.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from homerun._constants import WORK_RADIUS_METERS
from homerun.geo import distance_meters
from homerun.models.enums import GeofenceEvent, GpsStatus, PresenceState
from homerun.models.location import Coordinate, LocationError, LocationSample

_logger = logging.getLogger(__name__)


class GeofenceState(BaseModel):
    """Presence and edge flag carried across location ticks."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    presence: PresenceState = PresenceState.UNKNOWN
    status: GpsStatus = GpsStatus.IDLE
    was_at_work: bool = False
    last_distance_m: float | None = None


def is_inside(distance_m: float, radius_m: float) -> bool:
    """Strictly inside; a sample exactly on the boundary is outside."""
    return distance_m < radius_m


def advance(
    state: GeofenceState,
    distance_m: float,
    radius_m: float = WORK_RADIUS_METERS,
) -> tuple[GeofenceState, GeofenceEvent | None]:
    """Apply one location tick.

    Returns the new state and the edge event it produced, if any.
    """
    if is_inside(distance_m, radius_m):
        event = None if state.was_at_work else GeofenceEvent.ARRIVED
        return (
            GeofenceState(
                presence=PresenceState.AT_WORK,
                status=GpsStatus.AT_WORK,
                was_at_work=True,
                last_distance_m=distance_m,
            ),
            event,
        )

    if state.was_at_work:
        return (
            GeofenceState(
                presence=PresenceState.AWAY,
                status=GpsStatus.LEFT_WORK,
                was_at_work=False,
                last_distance_m=distance_m,
            ),
            GeofenceEvent.DEPARTED,
        )

    # Already known to be away (or never seen at work): nothing changes.
    return state.model_copy(update={"last_distance_m": distance_m}), None


class GeofenceMonitor:
    """Tracks presence around a fixed work coordinate.

    Samples must be fed in arrival order; the edge flag is the only state
    carried between them.
    """

    def __init__(
        self,
        work: Coordinate,
        *,
        radius_m: float = WORK_RADIUS_METERS,
        state: GeofenceState | None = None,
    ) -> None:
        self._work = work
        self._radius_m = radius_m
        self._state = state or GeofenceState()

    @property
    def state(self) -> GeofenceState:
        return self._state

    @property
    def work(self) -> Coordinate:
        return self._work

    @property
    def radius_m(self) -> float:
        return self._radius_m

    def process(self, sample: LocationSample) -> GeofenceEvent | None:
        """Advance the state with *sample* and return the edge event, if any."""
        distance = distance_meters(sample.coordinate, self._work)
        self._state, event = advance(self._state, distance, self._radius_m)
        if event is not None:
            _logger.info("Geofence %s (distance=%.1fm radius=%.1fm)", event.value, distance, self._radius_m)
        else:
            _logger.debug("Location tick: distance=%.1fm status=%s", distance, self._state.status.value)
        return event

    def report_error(self, error: LocationError) -> None:
        """Log a provider failure; presence is left untouched."""
        _logger.warning("Location error (code=%s): %s", error.code.name, error.message or "<no message>")
