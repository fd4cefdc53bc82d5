from __future__ import annotations

import pytest
from _fakes import FakeMapsBackend, RecordingSink

from homerun.config import HomeRunConfig


@pytest.fixture
def config() -> HomeRunConfig:
    return HomeRunConfig(api_key="test-key")


@pytest.fixture
def backend() -> FakeMapsBackend:
    return FakeMapsBackend()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
