"""Routing endpoint: traffic-aware drive duration between two addresses.

Endpoint:
  - POST directions/v2:computeRoutes
"""

from __future__ import annotations

import logging
from typing import Any

from homerun._constants import ROUTES_FIELD_MASK
from homerun._transport import Transport
from homerun.config import HomeRunConfig
from homerun.exceptions import RouteError
from homerun.models.traffic import RouteDurations

_logger = logging.getLogger(__name__)


def build_route_request(
    config: HomeRunConfig,
    origin: str,
    destination: str,
) -> tuple[dict[str, Any], dict[str, str]]:
    """Build the ``computeRoutes`` body and headers for a driving route."""
    body: dict[str, Any] = {
        "origin": {"address": origin},
        "destination": {"address": destination},
        "travelMode": "DRIVE",
        "routingPreference": "TRAFFIC_AWARE",
    }
    headers = {
        "X-Goog-Api-Key": config.api_key,
        "X-Goog-FieldMask": ROUTES_FIELD_MASK,
    }
    return body, headers


def parse_route_response(response: dict[str, Any]) -> RouteDurations | None:
    """Return the first route's durations, or ``None`` when there is no usable route."""
    routes = response.get("routes")
    if not isinstance(routes, list) or not routes:
        return None
    first = routes[0]
    if not isinstance(first, dict):
        return None
    durations = RouteDurations.model_validate(first)
    if not durations.is_complete:
        return None
    return durations


async def compute_route(
    config: HomeRunConfig,
    transport: Transport,
    origin: str,
    destination: str,
) -> RouteDurations | None:
    """Request one traffic-aware driving route from *origin* to *destination*.

    Returns ``None`` when the service answers without a route. Transport
    failures propagate as :class:`~homerun.exceptions.HomeRunTransportError`.

    Raises
    ------
    RouteError
        If the service replies with an error object.
    """
    body, headers = build_route_request(config, origin, destination)
    response = await transport.post_json(config.routes_url, body, headers)

    error = response.get("error")
    if isinstance(error, dict):
        raise RouteError(
            f"Routing failed: {error.get('status', '')} {error.get('message', '')}".strip(),
            status=str(error.get("status", "")),
            endpoint=config.routes_url,
        )

    durations = parse_route_response(response)
    _logger.debug(
        "Route response: routes=%d durations=%s",
        len(response.get("routes") or []),
        durations,
    )
    return durations
