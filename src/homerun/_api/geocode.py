"""Geocoding endpoint: resolves a free-text address to a coordinate.

Endpoint:
  - GET geocode/json?address=...&key=...
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from homerun._transport import Transport
from homerun.config import HomeRunConfig
from homerun.exceptions import GeocodeError, HomeRunTransportError
from homerun.models.location import Coordinate

_logger = logging.getLogger(__name__)

# Statuses meaning "the request worked, there is just nothing to return".
_NO_MATCH_STATUSES = frozenset({"ZERO_RESULTS"})


def build_geocode_params(config: HomeRunConfig, address: str) -> dict[str, str]:
    return {"address": address, "key": config.api_key}


def parse_geocode_response(response: dict[str, Any], *, endpoint: str = "") -> Coordinate | None:
    """Extract the best-match coordinate, or ``None`` when there is no match.

    Raises
    ------
    GeocodeError
        If the upstream reports an error status or a malformed location.
    """
    status = str(response.get("status", "OK"))
    if status != "OK" and status not in _NO_MATCH_STATUSES:
        raise GeocodeError(
            f"Geocoding failed: status={status} message={response.get('error_message', '')}",
            status=status,
            endpoint=endpoint,
        )

    results = response.get("results")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    geometry = first.get("geometry") if isinstance(first, dict) else None
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        return None

    try:
        return Coordinate.model_validate(location)
    except ValidationError as exc:
        raise GeocodeError(
            f"Geocoding returned an invalid location: {location}",
            status="invalid_location",
            endpoint=endpoint,
        ) from exc


async def resolve_coordinate(
    config: HomeRunConfig,
    transport: Transport,
    address: str,
) -> Coordinate:
    """Resolve *address* to a coordinate with a single request.

    Parameters
    ----------
    config : HomeRunConfig
        Client configuration.
    transport : Transport
        HTTP transport.
    address : str
        Free-text address.

    Returns
    -------
    Coordinate
        The best-match coordinate.

    Raises
    ------
    GeocodeError
        If there is no candidate, the upstream reports an error, or the
        network call fails.
    """
    if not address.strip():
        raise GeocodeError("Cannot geocode an empty address", status="empty_address", endpoint=config.geocode_url)

    try:
        response = await transport.get_json(config.geocode_url, build_geocode_params(config, address))
    except HomeRunTransportError as exc:
        _logger.debug("Geocode request failed", exc_info=True)
        raise GeocodeError(str(exc), status="transport", endpoint=config.geocode_url) from exc

    coordinate = parse_geocode_response(response, endpoint=config.geocode_url)
    if coordinate is None:
        raise GeocodeError(
            "No geocoding candidate for address",
            status=str(response.get("status", "ZERO_RESULTS")),
            endpoint=config.geocode_url,
        )

    _logger.debug("Geocoded work address to lat=%.6f lng=%.6f", coordinate.lat, coordinate.lng)
    return coordinate
