"""High-level async controller for the commute widget."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from homerun._api.geocode import resolve_coordinate
from homerun._transport import AiohttpTransport, Transport
from homerun.config import HomeRunConfig
from homerun.exceptions import (
    GeocodeError,
    HomeRunError,
    LocationUnsupportedError,
    MissingAddressError,
    MissingCoordinateError,
    PreconditionError,
)
from homerun.geofence import GeofenceMonitor
from homerun.location import LocationProvider, LocationSubscription
from homerun.models.address import AddressPair
from homerun.models.enums import GeofenceEvent, NotificationPermission
from homerun.models.location import Coordinate, LocationError
from homerun.models.traffic import TrafficError, TrafficResult
from homerun.notify import LogNotificationSink, NotificationSink, Notifier, WebhookNotificationSink
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
from homerun.state.store import AppState, StateStore
from homerun.store import AddressStore, JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from homerun.traffic import TrafficCheck, TrafficChecker

_logger = logging.getLogger(__name__)


class HomeRunClient:
    """Async controller owning the application state.

    Usage::

        async with HomeRunClient(config, location_provider=provider) as client:
            await client.save_addresses("Hanaton, Israel", "Migdal Tefen, Israel")
            await client.request_notification_permission()
            client.start_monitoring()
    """

    def __init__(
        self,
        config: HomeRunConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        key_value_store: KeyValueStore | None = None,
        location_provider: LocationProvider | None = None,
        notification_sink: NotificationSink | None = None,
        on_state_change: Callable[[AppState, AppEvent], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._location_provider = location_provider
        self._sink = notification_sink
        self._notifier: Notifier | None = None
        self._traffic: TrafficChecker | None = None
        self._subscription: LocationSubscription | None = None
        self._monitor_task: asyncio.Task[None] | None = None
        self._pending_checks: set[asyncio.Task[None]] = set()

        if key_value_store is None:
            if config.storage_path:
                key_value_store = JsonFileKeyValueStore(config.storage_path)
            else:
                key_value_store = MemoryKeyValueStore()
        self._address_store = AddressStore(key_value_store)

        addresses, coordinate = self._address_store.load()
        self._store = StateStore(AppState(addresses=addresses, work_coordinate=coordinate))
        if on_state_change is not None:
            self._store.subscribe(on_state_change)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HomeRunClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = AiohttpTransport(self._http_session, timeout=self._config.request_timeout)
        if self._sink is None:
            if self._config.notify_webhook_url:
                self._sink = WebhookNotificationSink(self._transport, self._config.notify_webhook_url)
            else:
                self._sink = LogNotificationSink()
        self._notifier = Notifier(self._sink, title=self._config.notification_title)
        self._traffic = TrafficChecker(self._config, self._transport, self._notifier)
        self._apply(NotificationPermissionChanged(permission=self._sink.permission))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._monitor_task is not None:
            await self.stop_monitoring()
        for task in list(self._pending_checks):
            task.cancel()
        await self.wait_for_checks()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._notifier = None
        self._traffic = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._store.state

    def subscribe(self, listener: Callable[[AppState, AppEvent], None]) -> Callable[[], None]:
        """Register a state listener; returns a callable that removes it."""
        return self._store.subscribe(listener)

    def _apply(self, event: AppEvent) -> AppState:
        return self._store.apply(event)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise HomeRunError("Client not initialized. Use 'async with HomeRunClient(...) as client:'")
        return self._transport

    def _require_traffic(self) -> TrafficChecker:
        if self._traffic is None:
            raise HomeRunError("Client not initialized. Use 'async with HomeRunClient(...) as client:'")
        return self._traffic

    def _require_notifier(self) -> Notifier:
        if self._notifier is None:
            raise HomeRunError("Client not initialized. Use 'async with HomeRunClient(...) as client:'")
        return self._notifier

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def edit_addresses(self, home: str | None = None, work: str | None = None) -> AppState:
        """Change address text in memory only.

        The stored coordinate is neither refreshed nor invalidated; that
        only happens on :meth:`save_addresses`.
        """
        current = self.state.addresses
        addresses = AddressPair(
            home=current.home if home is None else home,
            work=current.work if work is None else work,
        )
        return self._apply(AddressesEdited(addresses=addresses))

    async def save_addresses(self, home: str | None = None, work: str | None = None) -> Coordinate | None:
        """Persist the addresses and geocode the work address.

        Returns the work coordinate in effect afterwards. When geocoding
        fails the previous coordinate (if any) is kept and the failure is
        recorded in :attr:`AppState.geocode_error`.
        """
        transport = self._require_transport()
        if home is not None or work is not None:
            self.edit_addresses(home, work)
        addresses = self.state.addresses

        self._address_store.save(addresses)
        self._apply(AddressesSaved(addresses=addresses))

        try:
            coordinate = await resolve_coordinate(self._config, transport, addresses.work)
        except GeocodeError as exc:
            _logger.warning("Could not geocode work address: %s", exc)
            self._apply(GeocodeFailed(error=str(exc)))
            return self.state.work_coordinate

        self._address_store.save_coordinate(coordinate)
        self._apply(CoordinateResolved(coordinate=coordinate))
        return coordinate

    # ------------------------------------------------------------------
    # Traffic
    # ------------------------------------------------------------------

    async def check_traffic(self) -> TrafficResult:
        """Check traffic from work to home and notify about the result.

        Raises
        ------
        MissingAddressError
            If either address is empty. No request is made.
        """
        traffic = self._require_traffic()
        addresses = self.state.addresses
        if not addresses.is_complete:
            raise MissingAddressError("Please enter both home and work addresses first.")

        sequence = traffic.begin()
        self._apply(TrafficCheckStarted(sequence=sequence))
        try:
            check = await traffic.check(addresses.home, addresses.work, sequence=sequence)
        except Exception as exc:
            # A started check always completes.
            _logger.warning("Traffic check seq=%d failed", sequence, exc_info=True)
            check = TrafficCheck(
                sequence=sequence,
                result=TrafficError(error=str(exc) or type(exc).__name__),
                stale=traffic.is_stale(sequence),
            )
        if not check.stale:
            self._apply(TrafficCheckCompleted(sequence=check.sequence, result=check.result))
        return check.result

    async def wait_for_checks(self) -> None:
        """Wait for departure-triggered traffic checks that are still running."""
        while self._pending_checks:
            await asyncio.gather(*list(self._pending_checks), return_exceptions=True)

    def _spawn_departure_check(self) -> None:
        task = asyncio.create_task(self._check_after_departure())
        self._pending_checks.add(task)
        task.add_done_callback(self._pending_checks.discard)

    async def _check_after_departure(self) -> None:
        try:
            await self.check_traffic()
        except PreconditionError as exc:
            _logger.warning("Left work but cannot check traffic: %s", exc)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def request_notification_permission(self) -> NotificationPermission:
        permission = await self._require_notifier().request_permission()
        self._apply(NotificationPermissionChanged(permission=permission))
        return permission

    # ------------------------------------------------------------------
    # Location monitoring
    # ------------------------------------------------------------------

    @property
    def is_monitoring(self) -> bool:
        return self._monitor_task is not None and not self._monitor_task.done()

    def start_monitoring(self) -> None:
        """Subscribe to location updates and watch the work geofence.

        Starting again replaces the previous subscription instead of adding
        a second listener. Must be called from a running event loop.

        Raises
        ------
        MissingCoordinateError
            If no work coordinate has been resolved yet.
        LocationUnsupportedError
            If there is no usable location provider.
        """
        coordinate = self.state.work_coordinate
        if coordinate is None:
            raise MissingCoordinateError("Please save your addresses first!")
        provider = self._location_provider
        if provider is None or not provider.is_supported:
            raise LocationUnsupportedError("GPS not supported.")
        # Fails with RuntimeError before anything is subscribed.
        loop = asyncio.get_running_loop()

        self._cancel_subscription()

        monitor = GeofenceMonitor(
            coordinate,
            radius_m=self._config.work_radius_m,
            state=self.state.geofence,
        )
        subscription = provider.watch(high_accuracy=self._config.high_accuracy)
        self._subscription = subscription
        self._monitor_task = loop.create_task(self._consume(subscription, monitor))
        self._apply(MonitoringStarted())
        _logger.debug(
            "Monitoring started: work=(%.6f, %.6f) radius=%.1fm",
            coordinate.lat,
            coordinate.lng,
            self._config.work_radius_m,
        )

    async def stop_monitoring(self) -> None:
        """Cancel the location subscription; presence is kept, status goes idle."""
        task = self._monitor_task
        self._cancel_subscription()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._apply(MonitoringStopped())

    def _cancel_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
        self._subscription = None
        self._monitor_task = None

    async def _consume(self, subscription: LocationSubscription, monitor: GeofenceMonitor) -> None:
        async for update in subscription:
            if isinstance(update, LocationError):
                monitor.report_error(update)
                self._apply(LocationFailed(error=update))
                continue

            event = monitor.process(update)
            self._apply(GeofenceChanged(geofence=monitor.state, transition=event))
            if event is GeofenceEvent.DEPARTED:
                self._spawn_departure_check()
