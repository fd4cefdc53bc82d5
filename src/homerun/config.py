"""Client configuration for homerun."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from homerun._constants import GEOCODE_URL, NOTIFICATION_TITLE, ROUTES_URL, WORK_RADIUS_METERS
from homerun.exceptions import HomeRunConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise HomeRunConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class HomeRunConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        Google Maps Platform API key used for both geocoding and routing.
    geocode_url : str
        Geocoding endpoint. Defaults to the Google Geocoding JSON API.
    routes_url : str
        Routing endpoint. Defaults to the Google Routes ``computeRoutes`` API.
    work_radius_m : float
        Geofence radius around the work coordinate, in meters.
    high_accuracy : bool
        Ask the location provider for high-accuracy samples.
    request_timeout : float
        Total timeout for a single HTTP request, in seconds.
    storage_path : str or None
        JSON file used for persisted addresses. ``None`` keeps everything
        in memory.
    notify_webhook_url : str or None
        When set, notifications are POSTed to this URL.
    notification_title : str
        Title used for every notification.
    """

    api_key: str
    geocode_url: str = GEOCODE_URL
    routes_url: str = ROUTES_URL
    work_radius_m: float = WORK_RADIUS_METERS
    high_accuracy: bool = True
    request_timeout: float = 20.0
    storage_path: str | None = None
    notify_webhook_url: str | None = None
    notification_title: str = NOTIFICATION_TITLE

    def __post_init__(self) -> None:
        if self.work_radius_m <= 0:
            raise HomeRunConfigError(f"work_radius_m must be positive, got {self.work_radius_m}")
        if self.request_timeout <= 0:
            raise HomeRunConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> HomeRunConfig:
        """Create configuration from environment variables.

        Reads ``GOOGLE_MAPS_API_KEY`` (or ``HOMERUN_API_KEY``) and optional
        ``HOMERUN_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HomeRunConfig
            Populated configuration.

        Raises
        ------
        HomeRunConfigError
            If no API key is available or a numeric variable is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HOMERUN_GEOCODE_URL": "geocode_url",
            "HOMERUN_ROUTES_URL": "routes_url",
            "HOMERUN_STORAGE_PATH": "storage_path",
            "HOMERUN_NOTIFY_WEBHOOK_URL": "notify_webhook_url",
            "HOMERUN_NOTIFICATION_TITLE": "notification_title",
        }
        config_kwargs: dict[str, Any] = {}

        api_key = env.get("HOMERUN_API_KEY") or env.get("GOOGLE_MAPS_API_KEY")
        if api_key:
            config_kwargs["api_key"] = api_key

        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "work_radius_m" not in overrides:
            radius = _env_float(env, "HOMERUN_WORK_RADIUS_M")
            if radius is not None:
                config_kwargs["work_radius_m"] = radius

        if "request_timeout" not in overrides:
            timeout = _env_float(env, "HOMERUN_REQUEST_TIMEOUT")
            if timeout is not None:
                config_kwargs["request_timeout"] = timeout

        if "high_accuracy" not in overrides:
            config_kwargs["high_accuracy"] = _env_bool(env.get("HOMERUN_HIGH_ACCURACY"), True)

        config_kwargs.update(overrides)

        if not config_kwargs.get("api_key"):
            raise HomeRunConfigError("No API key configured (set GOOGLE_MAPS_API_KEY or pass api_key)")

        return cls(**config_kwargs)
