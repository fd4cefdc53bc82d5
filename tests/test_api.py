from __future__ import annotations

import pytest
from _fakes import FakeMapsBackend

from homerun._api.geocode import parse_geocode_response, resolve_coordinate
from homerun._api.routes import compute_route, parse_route_response
from homerun.config import HomeRunConfig
from homerun.exceptions import GeocodeError, HomeRunTransportError, RouteError
from homerun.models.location import Coordinate


def _geocode(location: dict[str, float], status: str = "OK") -> dict[str, object]:
    return {"status": status, "results": [{"geometry": {"location": location}}, {"geometry": {"location": {}}}]}


def test_geocode_takes_first_candidate() -> None:
    assert parse_geocode_response(_geocode({"lat": 32.96, "lng": 35.25})) == Coordinate(lat=32.96, lng=35.25)


def test_geocode_zero_results_is_no_match() -> None:
    assert parse_geocode_response({"status": "ZERO_RESULTS", "results": []}) is None


def test_geocode_error_status() -> None:
    with pytest.raises(GeocodeError) as exc_info:
        parse_geocode_response({"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."})
    assert exc_info.value.status == "REQUEST_DENIED"
    assert "API key is invalid" in str(exc_info.value)


def test_geocode_invalid_location() -> None:
    with pytest.raises(GeocodeError):
        parse_geocode_response(_geocode({"lat": 123.0, "lng": 0.0}))


@pytest.mark.asyncio
async def test_resolve_empty_address_makes_no_request(config: HomeRunConfig, backend: FakeMapsBackend) -> None:
    with pytest.raises(GeocodeError):
        await resolve_coordinate(config, backend, "   ")
    assert backend.gets == []


@pytest.mark.asyncio
async def test_resolve_wraps_transport_failure(config: HomeRunConfig, backend: FakeMapsBackend) -> None:
    backend.fail_geocode = True
    with pytest.raises(GeocodeError) as exc_info:
        await resolve_coordinate(config, backend, "Migdal Tefen, Israel")
    assert exc_info.value.status == "transport"
    assert isinstance(exc_info.value.__cause__, HomeRunTransportError)


def test_route_without_routes() -> None:
    assert parse_route_response({}) is None
    assert parse_route_response({"routes": []}) is None
    assert parse_route_response({"routes": [{"duration": "60s"}]}) is None


@pytest.mark.asyncio
async def test_route_error_object(config: HomeRunConfig) -> None:
    class _ErrorBackend(FakeMapsBackend):
        async def post_json(self, url, body, headers=None):  # type: ignore[no-untyped-def]
            return {"error": {"code": 403, "status": "PERMISSION_DENIED", "message": "API key not valid"}}

    with pytest.raises(RouteError) as exc_info:
        await compute_route(config, _ErrorBackend(), "Work", "Home")
    assert exc_info.value.status == "PERMISSION_DENIED"
