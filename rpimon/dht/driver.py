"""Adapter around the DHT22 hardware driver.

One ``read()`` is exactly one timed poll of the sensor. Failures are
reported as ``SensorReadError`` subclasses; retrying is left to the caller.
"""

from typing import Any, Protocol

from rpimon.dht.models import Reading
from rpimon.lib.config import Settings, get_settings
from rpimon.lib.exceptions import (
    ChecksumError,
    GpioError,
    ReadTimeoutError,
    SensorReadError,
)
from rpimon.logging import get_logger

logger = get_logger("dht.driver")

# Messages raised by adafruit_dht as RuntimeError
_CHECKSUM_MESSAGES = ("Checksum did not validate",)
_TIMEOUT_MESSAGES = (
    "A full buffer was not returned",
    "DHT sensor not found",
    "Timed out",
)


class DHTDriver(Protocol):
    """Protocol for a single DHT sensor."""

    pin: int

    def read(self) -> Reading: ...

    def exit(self) -> None: ...


def classify_error(error: Exception) -> SensorReadError:
    """Map a driver exception onto the read error taxonomy."""
    message = str(error) or type(error).__name__
    if isinstance(error, RuntimeError):
        if any(m in message for m in _CHECKSUM_MESSAGES):
            return ChecksumError(message)
        if any(m in message for m in _TIMEOUT_MESSAGES):
            return ReadTimeoutError(message)
    return GpioError(message)


class AdafruitDHT22Driver:
    """DHT22 on a Raspberry Pi GPIO pin, via adafruit-circuitpython-dht.

    The underlying device is opened on first read so that a pin which cannot
    be claimed surfaces as a ``GpioError`` like any other read failure.
    """

    def __init__(self, pin: int, device: Any = None) -> None:
        self.pin = pin
        self._dht = device

    def _device(self) -> Any:
        if self._dht is None:
            import adafruit_dht
            import board

            try:
                self._dht = adafruit_dht.DHT22(getattr(board, f"D{self.pin}"))
            except (AttributeError, RuntimeError, OSError, ValueError) as e:
                raise GpioError(f"Unable to open GPIO pin {self.pin}: {e}") from e
        return self._dht

    def read(self) -> Reading:
        dht = self._device()
        try:
            temperature = dht.temperature
            humidity = dht.humidity
        except (RuntimeError, OSError) as e:
            raise classify_error(e) from e

        if temperature is None or humidity is None:
            raise ReadTimeoutError(f"No data from sensor on pin {self.pin}")
        return Reading(temperature=float(temperature), humidity=float(humidity))

    def exit(self) -> None:
        if self._dht is not None:
            self._dht.exit()
            self._dht = None


def create_driver(pin: int, settings: Settings | None = None) -> DHTDriver:
    """Create a driver for ``pin`` based on configuration."""
    settings = settings or get_settings()
    if settings.mock_sensors:
        from rpimon.lib.mock import MockDHTSensor

        logger.info("Using mock DHT sensor on pin %d", pin)
        return MockDHTSensor(pin)
    return AdafruitDHT22Driver(pin)
