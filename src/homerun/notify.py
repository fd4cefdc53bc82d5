"""Notification sinks and the permission-aware notifier."""

from __future__ import annotations

import logging
from typing import Protocol

from homerun._constants import NOTIFICATION_TITLE, NOTIFICATIONS_ENABLED_MESSAGE
from homerun._transport import Transport
from homerun.models.enums import NotificationPermission

_logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Platform notification facility with a tri-state permission."""

    @property
    def permission(self) -> NotificationPermission:
        ...

    async def request_permission(self) -> NotificationPermission:
        ...

    async def show(self, title: str, body: str) -> None:
        ...


class LogNotificationSink:
    """Emits notifications as INFO log records."""

    def __init__(self, permission: NotificationPermission = NotificationPermission.DEFAULT) -> None:
        self._permission = permission

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        if self._permission == NotificationPermission.DEFAULT:
            self._permission = NotificationPermission.GRANTED
        return self._permission

    async def show(self, title: str, body: str) -> None:
        _logger.info("%s: %s", title, body)


class WebhookNotificationSink:
    """POSTs ``{"title": ..., "body": ...}`` to a webhook URL.

    Permission is granted once a URL is configured; without one the sink
    reports ``denied`` and never sends.
    """

    def __init__(self, transport: Transport, url: str | None) -> None:
        self._transport = transport
        self._url = url
        self._permission = NotificationPermission.DEFAULT

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        self._permission = NotificationPermission.GRANTED if self._url else NotificationPermission.DENIED
        return self._permission

    async def show(self, title: str, body: str) -> None:
        if not self._url:
            return
        await self._transport.post_json(self._url, {"title": title, "body": body})


class Notifier:
    """Sends notifications through a sink, only while permission is granted.

    Sink failures are logged and never propagate; a missing notification
    must not fail the flow that triggered it.
    """

    def __init__(self, sink: NotificationSink, *, title: str = NOTIFICATION_TITLE) -> None:
        self._sink = sink
        self._title = title

    @property
    def permission(self) -> NotificationPermission:
        return self._sink.permission

    async def notify(self, message: str) -> bool:
        """Send *message*; returns ``True`` when the sink accepted it."""
        if self._sink.permission != NotificationPermission.GRANTED:
            _logger.debug("Notification suppressed (permission=%s)", self._sink.permission)
            return False
        try:
            await self._sink.show(self._title, message)
        except Exception:
            _logger.warning("Notification error", exc_info=True)
            return False
        return True

    async def request_permission(self) -> NotificationPermission:
        """Ask the platform once; confirm with a notification when granted."""
        permission = await self._sink.request_permission()
        _logger.debug("Notification permission: %s", permission)
        if permission == NotificationPermission.GRANTED:
            await self.notify(NOTIFICATIONS_ENABLED_MESSAGE)
        return permission
