"""Coordinate and location stream models."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from homerun.models._base import HomeRunBaseModel
from homerun.models.enums import LocationErrorCode


class Coordinate(HomeRunBaseModel):
    """A latitude/longitude pair in decimal degrees.

    Serialized as ``{"lat": ..., "lng": ...}``, the same shape the
    geocoding API returns under ``geometry.location``.
    """

    lat: float = Field(..., ge=-90.0, le=90.0, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(
        ...,
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("lng", "lon", "longitude"),
    )


class LocationSample(HomeRunBaseModel):
    """A single position fix pushed by a location provider.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float or None
        Horizontal accuracy radius in meters, when the provider reports it.
    timestamp : datetime or None
        Time of the fix, when the provider reports it.
    """

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    accuracy: float | None = None
    timestamp: datetime | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.latitude, lng=self.longitude)


class LocationError(HomeRunBaseModel):
    """An asynchronous failure reported by the location provider.

    Errors are reported on the same stream as samples; they never end the
    subscription.
    """

    code: LocationErrorCode = LocationErrorCode.UNKNOWN
    message: str = ""
