from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest
from _fakes import FakeMapsBackend, RecordingSink

from homerun._constants import ROUTES_FIELD_MASK
from homerun.config import HomeRunConfig
from homerun.exceptions import MissingAddressError
from homerun.models.enums import NotificationPermission, TrafficClassification
from homerun.models.traffic import TrafficError, TrafficReport, classify_delay
from homerun.notify import Notifier
from homerun.traffic import TrafficChecker, build_notification_message

HOME = "Hanaton, Israel"
WORK = "Migdal Tefen, Israel"


def _checker(config: HomeRunConfig, backend: Any, sink: RecordingSink) -> TrafficChecker:
    return TrafficChecker(config, backend, Notifier(sink))


def test_classification_boundary_is_exclusive() -> None:
    assert classify_delay(5) is TrafficClassification.CLEAR
    assert classify_delay(6) is TrafficClassification.TRAFFIC
    assert classify_delay(-3) is TrafficClassification.CLEAR


def test_five_minute_delay_is_clear() -> None:
    report = TrafficReport.from_durations(1800, 1500)
    assert report.delay_minutes == 5
    assert report.classification is TrafficClassification.CLEAR


def test_ten_minute_delay_is_traffic() -> None:
    report = TrafficReport.from_durations(2100, 1500)
    assert report.delay_minutes == 10
    assert report.classification is TrafficClassification.TRAFFIC


def test_delay_rounds_half_up() -> None:
    # 150 s is exactly 2.5 minutes.
    assert TrafficReport.from_durations(1650, 1500).delay_minutes == 3


def test_notification_messages() -> None:
    assert build_notification_message(TrafficReport.from_durations(2100, 1500)) == (
        "⚠️ Traffic alert! 10 min delay on your way home."
    )
    assert build_notification_message(TrafficReport.from_durations(1800, 1500)) == "✅ Road is clear! 30 min drive home."


@pytest.mark.asyncio
async def test_check_requests_work_to_home_drive(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    check = await _checker(config, backend, sink).check(HOME, WORK)

    url, body, headers = backend.posts[0]
    assert url == config.routes_url
    assert body == {
        "origin": {"address": WORK},
        "destination": {"address": HOME},
        "travelMode": "DRIVE",
        "routingPreference": "TRAFFIC_AWARE",
    }
    assert headers["X-Goog-Api-Key"] == "test-key"
    assert headers["X-Goog-FieldMask"] == ROUTES_FIELD_MASK
    assert isinstance(check.result, TrafficReport)
    assert check.result.current_duration_seconds == 1800
    assert check.result.typical_duration_seconds == 1500
    assert check.result.distance_meters == 24000


@pytest.mark.asyncio
async def test_clear_road_notifies_drive_time(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    check = await _checker(config, backend, sink).check(HOME, WORK)

    assert check.notified is True
    assert sink.bodies == ["✅ Road is clear! 30 min drive home."]
    assert sink.shown[0][0] == config.notification_title


@pytest.mark.asyncio
async def test_traffic_notifies_delay(config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink) -> None:
    backend.routes = [{"duration": "2100s", "staticDuration": "1500s"}]

    check = await _checker(config, backend, sink).check(HOME, WORK)

    assert isinstance(check.result, TrafficReport)
    assert check.result.has_traffic
    assert sink.bodies == ["⚠️ Traffic alert! 10 min delay on your way home."]


@pytest.mark.asyncio
async def test_no_route_is_error_without_notification(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    backend.routes = []

    check = await _checker(config, backend, sink).check(HOME, WORK)

    assert check.result == TrafficError(error="Could not get route info.")
    assert check.notified is False
    assert sink.shown == []


@pytest.mark.asyncio
async def test_network_failure_is_error_without_notification(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    backend.fail_routes = True

    check = await _checker(config, backend, sink).check(HOME, WORK)

    assert isinstance(check.result, TrafficError)
    assert "connection reset" in check.result.error
    assert sink.shown == []


@pytest.mark.asyncio
async def test_route_error_object_is_error_result(config: HomeRunConfig, sink: RecordingSink) -> None:
    class _ErrorBackend(FakeMapsBackend):
        async def post_json(
            self,
            url: str,
            body: Mapping[str, Any],
            headers: Mapping[str, str] | None = None,
        ) -> dict[str, Any]:
            return {"error": {"status": "INVALID_ARGUMENT", "message": "Origin not found"}}

    check = await _checker(config, _ErrorBackend(), sink).check(HOME, WORK)

    assert isinstance(check.result, TrafficError)
    assert "INVALID_ARGUMENT" in check.result.error
    assert sink.shown == []


@pytest.mark.asyncio
async def test_missing_address_is_rejected_before_any_request(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    checker = _checker(config, backend, sink)

    with pytest.raises(MissingAddressError):
        await checker.check("  ", WORK)

    assert backend.route_calls == 0
    assert checker.latest_sequence == 0


@pytest.mark.asyncio
async def test_no_notification_without_permission(
    config: HomeRunConfig, backend: FakeMapsBackend, sink: RecordingSink
) -> None:
    sink.permission = NotificationPermission.DENIED

    check = await _checker(config, backend, sink).check(HOME, WORK)

    assert isinstance(check.result, TrafficReport)
    assert check.notified is False
    assert sink.shown == []


@pytest.mark.asyncio
async def test_stale_response_is_discarded(config: HomeRunConfig, sink: RecordingSink) -> None:
    release_first = asyncio.Event()

    class _SlowFirstBackend(FakeMapsBackend):
        async def post_json(
            self,
            url: str,
            body: Mapping[str, Any],
            headers: Mapping[str, str] | None = None,
        ) -> dict[str, Any]:
            self.posts.append((url, dict(body), dict(headers or {})))
            if len(self.posts) == 1:
                await release_first.wait()
                return {"routes": [{"duration": "2100s", "staticDuration": "1500s"}]}
            return {"routes": [{"duration": "1500s", "staticDuration": "1500s"}]}

    checker = _checker(config, _SlowFirstBackend(), sink)

    first = asyncio.create_task(checker.check(HOME, WORK))
    await asyncio.sleep(0)
    second = await checker.check(HOME, WORK)
    release_first.set()
    stale = await first

    assert second.stale is False
    assert second.sequence == 2
    assert stale.stale is True
    assert stale.sequence == 1
    assert sink.bodies == ["✅ Road is clear! 25 min drive home."]
