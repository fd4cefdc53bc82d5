"""Traffic check: current vs. typical drive time from work to home."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from homerun._api.routes import compute_route
from homerun._constants import NO_ROUTE_MESSAGE
from homerun._transport import Transport
from homerun.config import HomeRunConfig
from homerun.exceptions import HomeRunError, MissingAddressError
from homerun.models.traffic import TrafficError, TrafficReport, TrafficResult
from homerun.notify import Notifier

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrafficCheck:
    """Outcome of one :meth:`TrafficChecker.check` call.

    ``stale`` is set when a newer check was issued while this one was in
    flight; stale results are never notified.
    """

    sequence: int
    result: TrafficResult
    stale: bool = False
    notified: bool = False


def build_notification_message(report: TrafficReport) -> str:
    if report.has_traffic:
        return f"⚠️ Traffic alert! {report.delay_minutes} min delay on your way home."
    return f"✅ Road is clear! {report.current_minutes} min drive home."


class TrafficChecker:
    """Queries the routing service and notifies about the result.

    Every check takes a monotonic sequence number. When checks overlap
    (a manual check while a departure-triggered one is in flight) only the
    most recently issued one may notify.
    """

    def __init__(self, config: HomeRunConfig, transport: Transport, notifier: Notifier) -> None:
        self._config = config
        self._transport = transport
        self._notifier = notifier
        self._sequence = 0

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def begin(self) -> int:
        """Issue the next sequence number."""
        self._sequence += 1
        return self._sequence

    def is_stale(self, sequence: int) -> bool:
        return sequence < self._sequence

    async def fetch(self, home: str, work: str) -> TrafficResult:
        """One routing request from *work* to *home*; no retries, no side effects."""
        try:
            durations = await compute_route(self._config, self._transport, work, home)
        except HomeRunError as exc:
            _logger.warning("Traffic check failed: %s", exc)
            return TrafficError(error=str(exc) or type(exc).__name__)
        except ValidationError as exc:
            _logger.warning("Traffic check returned an unreadable route: %s", exc)
            return TrafficError(error=NO_ROUTE_MESSAGE)

        if durations is None or durations.duration is None or durations.static_duration is None:
            return TrafficError(error=NO_ROUTE_MESSAGE)

        return TrafficReport.from_durations(
            durations.duration,
            durations.static_duration,
            durations.distance_meters,
        )

    async def check(self, home: str, work: str, *, sequence: int | None = None) -> TrafficCheck:
        """Fetch the traffic result and notify on success.

        Parameters
        ----------
        home : str
            Destination address.
        work : str
            Origin address.
        sequence : int or None
            Sequence number from :meth:`begin`; issued here when omitted.

        Raises
        ------
        MissingAddressError
            If either address is empty. Nothing is requested.
        """
        if not home.strip() or not work.strip():
            raise MissingAddressError("Please enter both home and work addresses first.")

        if sequence is None:
            sequence = self.begin()

        result = await self.fetch(home, work)

        if self.is_stale(sequence):
            _logger.debug("Discarding stale traffic result seq=%d (latest=%d)", sequence, self._sequence)
            return TrafficCheck(sequence=sequence, result=result, stale=True)

        notified = False
        if isinstance(result, TrafficReport):
            _logger.info(
                "Traffic check seq=%d: %s (current=%ds typical=%ds delay=%dmin)",
                sequence,
                result.classification.value,
                result.current_duration_seconds,
                result.typical_duration_seconds,
                result.delay_minutes,
            )
            notified = await self._notifier.notify(build_notification_message(result))
        return TrafficCheck(sequence=sequence, result=result, notified=notified)
