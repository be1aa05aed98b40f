"""Mock sensor data generators for development.

Provides a mock implementation of the DHT driver that generates realistic
data without requiring hardware. Used when MOCK_SENSORS=1 is set.
"""

import random

from rpimon.dht.models import Reading
from rpimon.lib.exceptions import ChecksumError


def _random_walk(
    current: float, drift: float, min_val: float, max_val: float
) -> float:
    """Generate next value using random walk with bounds."""
    change = random.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


class MockDHTSensor:
    """Mock DHT22 sensor that generates realistic readings.

    - Temperature: drift=0.15, bounds 15-30
    - Humidity: drift=0.3, bounds 30-70

    A small share of reads fail with a checksum error, like a real sensor
    on a long cable does.
    """

    def __init__(self, pin: int, failure_rate: float = 0.1) -> None:
        self.pin = pin
        self._failure_rate = failure_rate
        self._temperature = random.uniform(20.0, 23.0)
        self._humidity = random.uniform(45.0, 55.0)

    def read(self) -> Reading:
        if random.random() < self._failure_rate:
            raise ChecksumError()
        self._temperature = _random_walk(
            self._temperature, drift=0.15, min_val=15.0, max_val=30.0
        )
        self._humidity = _random_walk(
            self._humidity, drift=0.3, min_val=30.0, max_val=70.0
        )
        return Reading(
            temperature=round(self._temperature, 1),
            humidity=round(self._humidity, 1),
        )

    def exit(self) -> None:
        """No-op for mock sensor."""
