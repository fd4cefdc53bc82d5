"""Routing response and traffic result models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from homerun._constants import TRAFFIC_DELAY_THRESHOLD_MINUTES
from homerun.models._base import DurationSeconds, HomeRunBaseModel, round_half_up
from homerun.models.enums import TrafficClassification


class RouteDurations(HomeRunBaseModel):
    """First route of a ``computeRoutes`` response.

    The API encodes durations as strings such as ``"1532s"``; they are
    parsed to integer seconds.

    Parameters
    ----------
    duration : int or None
        Traffic-aware duration in seconds.
    static_duration : int or None
        Typical duration without traffic, in seconds.
    distance_meters : int or None
        Route length in meters.
    """

    duration: DurationSeconds = None
    static_duration: DurationSeconds = None
    distance_meters: int | None = None

    @property
    def is_complete(self) -> bool:
        return self.duration is not None and self.static_duration is not None


def classify_delay(delay_minutes: int) -> TrafficClassification:
    """Traffic only when the delay is strictly greater than the threshold."""
    if delay_minutes > TRAFFIC_DELAY_THRESHOLD_MINUTES:
        return TrafficClassification.TRAFFIC
    return TrafficClassification.CLEAR


class TrafficReport(HomeRunBaseModel):
    """Successful traffic check: current vs. typical drive time."""

    kind: Literal["report"] = "report"
    current_duration_seconds: int = Field(..., ge=0)
    typical_duration_seconds: int = Field(..., ge=0)
    delay_minutes: int
    distance_meters: int | None = None

    @classmethod
    def from_durations(cls, duration: int, static_duration: int, distance_meters: int | None = None) -> TrafficReport:
        return cls(
            current_duration_seconds=duration,
            typical_duration_seconds=static_duration,
            delay_minutes=round_half_up((duration - static_duration) / 60),
            distance_meters=distance_meters,
        )

    @property
    def classification(self) -> TrafficClassification:
        return classify_delay(self.delay_minutes)

    @property
    def has_traffic(self) -> bool:
        return self.classification is TrafficClassification.TRAFFIC

    @property
    def current_minutes(self) -> int:
        return round_half_up(self.current_duration_seconds / 60)

    @property
    def typical_minutes(self) -> int:
        return round_half_up(self.typical_duration_seconds / 60)


class TrafficError(HomeRunBaseModel):
    """Failed traffic check. Never triggers a notification."""

    kind: Literal["error"] = "error"
    error: str


TrafficResult = TrafficReport | TrafficError
