"""Custom exceptions for the RPi monitoring service.

Provides a hierarchy of domain-specific exceptions so that callers can tell
fatal configuration problems apart from transient sensor noise.
"""


class RpimonError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(RpimonError):
    """Raised when the service configuration is missing or invalid."""


class SensorReadError(RpimonError):
    """Base exception for a failed single read of a DHT sensor."""


class ChecksumError(SensorReadError):
    """The reading was corrupted in transit."""

    def __init__(self, message: str = "Checksum did not validate") -> None:
        super().__init__(message)


class ReadTimeoutError(SensorReadError):
    """The sensor did not answer within the hardware window."""

    def __init__(self, message: str = "Timed out reading the sensor") -> None:
        super().__init__(message)


class GpioError(SensorReadError):
    """Lower-level GPIO fault while talking to the sensor."""


class SensorReadExhaustedError(RpimonError):
    """Raised when a bounded read policy gives up on a sensor."""

    def __init__(
        self, sensor_name: str, attempts: int, last_error: Exception | None
    ) -> None:
        super().__init__(
            f"Gave up reading {sensor_name} after {attempts} attempt(s): {last_error}"
        )
        self.sensor_name = sensor_name
        self.attempts = attempts
        self.last_error = last_error
