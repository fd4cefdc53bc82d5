from __future__ import annotations

import pytest

from homerun._constants import GEOCODE_URL, NOTIFICATION_TITLE
from homerun.config import HomeRunConfig, _env_bool
from homerun.exceptions import HomeRunConfigError

_ENV_KEYS = (
    "GOOGLE_MAPS_API_KEY",
    "HOMERUN_API_KEY",
    "HOMERUN_WORK_RADIUS_M",
    "HOMERUN_HIGH_ACCURACY",
    "HOMERUN_REQUEST_TIMEOUT",
    "HOMERUN_STORAGE_PATH",
    "HOMERUN_NOTIFY_WEBHOOK_URL",
    "HOMERUN_GEOCODE_URL",
    "HOMERUN_ROUTES_URL",
    "HOMERUN_NOTIFICATION_TITLE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = HomeRunConfig(api_key="k")
    assert config.work_radius_m == 200.0
    assert config.high_accuracy is True
    assert config.geocode_url == GEOCODE_URL
    assert config.notification_title == NOTIFICATION_TITLE
    assert config.storage_path is None


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
    monkeypatch.setenv("HOMERUN_WORK_RADIUS_M", "150")
    monkeypatch.setenv("HOMERUN_HIGH_ACCURACY", "off")
    monkeypatch.setenv("HOMERUN_STORAGE_PATH", "/tmp/homerun.json")
    monkeypatch.setenv("HOMERUN_NOTIFY_WEBHOOK_URL", "https://hooks.example/notify")

    config = HomeRunConfig.from_env()

    assert config.api_key == "maps-key"
    assert config.work_radius_m == 150.0
    assert config.high_accuracy is False
    assert config.storage_path == "/tmp/homerun.json"
    assert config.notify_webhook_url == "https://hooks.example/notify"


def test_homerun_key_wins_over_google_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
    monkeypatch.setenv("HOMERUN_API_KEY", "own-key")
    assert HomeRunConfig.from_env().api_key == "own-key"


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
    monkeypatch.setenv("HOMERUN_WORK_RADIUS_M", "not-a-number")

    config = HomeRunConfig.from_env(work_radius_m=75.0, api_key="explicit")

    assert config.work_radius_m == 75.0
    assert config.api_key == "explicit"


def test_missing_api_key() -> None:
    with pytest.raises(HomeRunConfigError, match="No API key"):
        HomeRunConfig.from_env()


def test_malformed_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")
    monkeypatch.setenv("HOMERUN_REQUEST_TIMEOUT", "soon")
    with pytest.raises(HomeRunConfigError, match="HOMERUN_REQUEST_TIMEOUT"):
        HomeRunConfig.from_env()


@pytest.mark.parametrize("radius", [0.0, -10.0])
def test_radius_must_be_positive(radius: float) -> None:
    with pytest.raises(HomeRunConfigError):
        HomeRunConfig(api_key="k", work_radius_m=radius)


def test_env_bool() -> None:
    assert _env_bool(None, True) is True
    assert _env_bool(" YES ", False) is True
    assert _env_bool("0", True) is False
    assert _env_bool("maybe", True) is True
