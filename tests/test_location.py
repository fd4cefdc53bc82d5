from __future__ import annotations

import asyncio

import pytest

from homerun.location import LocationSubscription, QueueLocationProvider
from homerun.models.enums import LocationErrorCode
from homerun.models.location import LocationError, LocationSample


def _sample(lat: float) -> LocationSample:
    return LocationSample(latitude=lat, longitude=35.0)


async def _collect(subscription: LocationSubscription) -> list[object]:
    return [update async for update in subscription]


@pytest.mark.asyncio
async def test_updates_arrive_in_order_with_errors_inline() -> None:
    provider = QueueLocationProvider()
    subscription = provider.watch()

    provider.push(_sample(1.0))
    provider.fail(LocationError(code=LocationErrorCode.TIMEOUT))
    provider.push(_sample(2.0))

    received: list[object] = []
    async for update in subscription:
        received.append(update)
        if len(received) == 3:
            subscription.cancel()

    assert [type(u).__name__ for u in received] == ["LocationSample", "LocationError", "LocationSample"]
    assert received[2] == _sample(2.0)


@pytest.mark.asyncio
async def test_cancel_drops_pending_updates_and_ends_stream() -> None:
    provider = QueueLocationProvider()
    subscription = provider.watch(high_accuracy=False)
    provider.push(_sample(1.0))
    provider.push(_sample(2.0))

    subscription.cancel()
    subscription.cancel()

    assert subscription.high_accuracy is False
    assert await _collect(subscription) == []
    assert subscription.deliver(_sample(3.0)) is False
    assert provider.subscriber_count == 0
    # Cancelled streams cannot be restarted.
    assert await _collect(subscription) == []


@pytest.mark.asyncio
async def test_every_subscription_sees_every_update() -> None:
    provider = QueueLocationProvider()
    first = provider.watch()
    second = provider.watch()

    provider.push(_sample(1.0))
    first.cancel()
    provider.push(_sample(2.0))

    assert await anext(second) == _sample(1.0)
    assert await anext(second) == _sample(2.0)
    assert provider.subscriber_count == 1
    second.cancel()

    assert await _collect(first) == []
    assert await _collect(second) == []
    assert provider.subscriber_count == 0


@pytest.mark.asyncio
async def test_join_waits_for_consumer() -> None:
    provider = QueueLocationProvider()
    subscription = provider.watch()
    seen: list[object] = []

    async def _consume() -> None:
        async for update in subscription:
            seen.append(update)

    task = asyncio.create_task(_consume())
    provider.push(_sample(1.0))
    provider.push(_sample(2.0))
    await provider.join()

    assert len(seen) == 2
    subscription.cancel()
    await task
