"""HTTP transport for the Google Maps Platform JSON APIs."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from homerun._constants import USER_AGENT
from homerun._redact import redact_for_log
from homerun.exceptions import HomeRunTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`AiohttpTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, str]) -> dict[str, Any]:
        ...

    async def post_json(
        self,
        url: str,
        body: Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        ...


class AiohttpTransport:
    """JSON-over-HTTP transport backed by an ``aiohttp.ClientSession``."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 20.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, params: Mapping[str, str]) -> dict[str, Any]:
        """GET *url* with query *params* and decode the JSON object reply."""
        _logger.debug("GET %s params=%s", url, redact_for_log(dict(params), redact_addresses=True))
        return await self._request("GET", url, params=dict(params))

    async def post_json(
        self,
        url: str,
        body: Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST *body* as JSON to *url* and decode the JSON object reply."""
        _logger.debug(
            "POST %s headers=%s body=%s",
            url,
            redact_for_log(dict(headers or {})),
            redact_for_log(dict(body), redact_addresses=True),
        )
        return await self._request(
            "POST",
            url,
            data=json.dumps(body, separators=(",", ":")),
            headers=dict(headers or {}),
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        data: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if data is not None:
            request_headers["content-type"] = "application/json; charset=UTF-8"
        if headers:
            request_headers.update(headers)

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                data=data,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise HomeRunTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except HomeRunTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise HomeRunTransportError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise HomeRunTransportError(f"Request to {url} failed: {exc}", url=url) from exc
        except (UnicodeDecodeError, LookupError) as exc:
            raise HomeRunTransportError(f"Undecodable body from {url}: {exc}", url=url) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HomeRunTransportError(
                f"Invalid JSON from {url}: {text[:200]}",
                url=url,
            ) from exc

        if not isinstance(body_json, dict):
            raise HomeRunTransportError(f"Expected a JSON object from {url}", url=url)

        return body_json
