"""Helpers for safe debug logging.

Requests to the Google Maps Platform carry the API key as a query
parameter or header. This module redacts such fields (and the user's
free-text addresses, when asked) before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "api_key",
        "apikey",
        "x-goog-api-key",
        "authorization",
        "cookie",
    }
)

_ADDRESS_KEYS: frozenset[str] = frozenset({"address", "home", "work", "homeaddress", "workaddress"})


def redact_for_log(
    value: Any,
    *,
    max_string: int = 512,
    redact_addresses: bool = False,
    _depth: int = 0,
) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            lowered = key.lower()
            if lowered in _SENSITIVE_VALUE_KEYS or (redact_addresses and lowered in _ADDRESS_KEYS):
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(
                    v,
                    max_string=max_string,
                    redact_addresses=redact_addresses,
                    _depth=_depth + 1,
                )
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [
            redact_for_log(v, max_string=max_string, redact_addresses=redact_addresses, _depth=_depth + 1)
            for v in value
        ]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
