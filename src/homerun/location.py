"""Location providers and cancellable sample subscriptions.

A provider pushes samples (or errors) into every open subscription.
Each subscription is an async iterator over an unbounded, non-restartable
stream; it ends only when cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from homerun.models.location import LocationError, LocationSample

_logger = logging.getLogger(__name__)

LocationUpdate = LocationSample | LocationError

_CLOSED = object()


class LocationSubscription:
    """A single consumer's view of a location stream.

    Iterating yields :class:`LocationSample` or :class:`LocationError` in
    arrival order. After :meth:`cancel` the iterator stops and cannot be
    restarted.
    """

    def __init__(self, *, high_accuracy: bool = True) -> None:
        self.high_accuracy = high_accuracy
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._cancelled = False
        self._in_flight = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def deliver(self, update: LocationUpdate) -> bool:
        """Queue *update* for the consumer. Returns ``False`` once cancelled."""
        if self._cancelled:
            return False
        self._queue.put_nowait(update)
        return True

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        # Undelivered samples are dropped; the consumer sees the end marker next.
        self._drain()
        self._queue.put_nowait(_CLOSED)

    async def join(self) -> None:
        """Wait until the consumer has processed every delivered update."""
        await self._queue.join()

    def __aiter__(self) -> LocationSubscription:
        return self

    async def __anext__(self) -> LocationUpdate:
        # An item counts as processed once the consumer asks for the next one.
        if self._in_flight:
            self._in_flight = False
            self._queue.task_done()
        if self._cancelled and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._queue.task_done()
            raise StopAsyncIteration
        self._in_flight = True
        return item  # type: ignore[return-value]

    def _drain(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()


class LocationProvider(Protocol):
    """Source of continuous location updates."""

    @property
    def is_supported(self) -> bool:
        ...

    def watch(self, *, high_accuracy: bool = True) -> LocationSubscription:
        ...


class QueueLocationProvider:
    """In-process provider fed by :meth:`push` and :meth:`fail`.

    Platform adapters (a GPS daemon client, a phone bridge, a replayed
    track) push into this channel; every open subscription receives every
    update.
    """

    def __init__(self, *, supported: bool = True) -> None:
        self._supported = supported
        self._subscriptions: list[LocationSubscription] = []

    @property
    def is_supported(self) -> bool:
        return self._supported

    @property
    def subscriber_count(self) -> int:
        self._prune()
        return len(self._subscriptions)

    def watch(self, *, high_accuracy: bool = True) -> LocationSubscription:
        subscription = LocationSubscription(high_accuracy=high_accuracy)
        self._subscriptions.append(subscription)
        _logger.debug("Location watch opened (high_accuracy=%s)", high_accuracy)
        return subscription

    def push(self, sample: LocationSample) -> None:
        self._publish(sample)

    def fail(self, error: LocationError) -> None:
        self._publish(error)

    async def join(self) -> None:
        """Wait until every open subscription has processed its backlog."""
        self._prune()
        for subscription in list(self._subscriptions):
            await subscription.join()

    def _publish(self, update: LocationUpdate) -> None:
        self._prune()
        for subscription in self._subscriptions:
            subscription.deliver(update)

    def _prune(self) -> None:
        self._subscriptions = [s for s in self._subscriptions if not s.cancelled]
