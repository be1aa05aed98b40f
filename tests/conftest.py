"""Shared pytest fixtures for the test suite."""

import logging
import sys
import time
from unittest.mock import MagicMock

import pytest

# Mock hardware-specific modules before they're imported
# These are only available on Raspberry Pi hardware
sys.modules["adafruit_dht"] = MagicMock()
sys.modules["board"] = MagicMock()

from rpimon.dht.models import Reading
from rpimon.lib.config import ReadPolicy, Sensor, Settings
from rpimon.lib.config.testing import set_settings


class FakeDriver:
    """In-memory DHT driver that fails with the given errors, then succeeds."""

    def __init__(self, pin=4, failures=(), reading=None):
        self.pin = pin
        self.reading = reading or Reading(temperature=22.5, humidity=55.0)
        self._failures = list(failures)
        self.calls = 0
        self.call_times: list[float] = []
        self.exited = False

    def read(self):
        self.calls += 1
        self.call_times.append(time.monotonic())
        if self._failures:
            raise self._failures.pop(0)
        return self.reading

    def exit(self):
        self.exited = True


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the rpimon namespace."""
    caplog.set_level(logging.INFO, logger="rpimon")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    test_settings = Settings(
        _env_file=None,
        graphite_endpoint="https://graphite.example.com/metrics",
        grafana_api_key="secret-token",
    )
    set_settings(test_settings)
    return test_settings


@pytest.fixture
def frozen_timestamp():
    """Return a fixed unix timestamp (2024-06-15 12:00:00 UTC)."""
    return 1718452800


@pytest.fixture
def fast_policy():
    """Read policy with a short spacing so retry tests run quickly."""
    return ReadPolicy(interval_sec=0.05)


@pytest.fixture
def sensors():
    return [Sensor(name="A", pin=4), Sensor(name="B", pin=17)]


@pytest.fixture
def fake_driver():
    return FakeDriver
