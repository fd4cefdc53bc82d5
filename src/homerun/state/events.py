"""Application events.

Every controller action and every location tick is converted into one of
these events. Only the state/store layer is allowed to fold them into
:class:`~homerun.state.store.AppState`.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from homerun.geofence import GeofenceState
from homerun.models.address import AddressPair
from homerun.models.enums import GeofenceEvent, NotificationPermission
from homerun.models.location import Coordinate, LocationError
from homerun.models.traffic import TrafficError, TrafficReport


class AppEvent(BaseModel):
    """Base for all application events."""

    model_config = ConfigDict(frozen=True)

    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class AddressesEdited(AppEvent):
    """Address text changed without saving; the stored coordinate is kept."""

    addresses: AddressPair


class AddressesSaved(AppEvent):
    addresses: AddressPair


class CoordinateResolved(AppEvent):
    coordinate: Coordinate


class GeocodeFailed(AppEvent):
    error: str


class MonitoringStarted(AppEvent):
    pass


class MonitoringStopped(AppEvent):
    pass


class GeofenceChanged(AppEvent):
    """A location tick was processed by the geofence monitor."""

    geofence: GeofenceState
    transition: GeofenceEvent | None = None


class LocationFailed(AppEvent):
    error: LocationError


class TrafficCheckStarted(AppEvent):
    sequence: int = Field(..., ge=1)


class TrafficCheckCompleted(AppEvent):
    sequence: int = Field(..., ge=1)
    result: TrafficReport | TrafficError


class NotificationPermissionChanged(AppEvent):
    permission: NotificationPermission
