"""Enumerations for the RPi monitoring service."""

from enum import StrEnum


class MeasureName(StrEnum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"


class Unit(StrEnum):
    """Measurement units for sensor readings."""

    CELSIUS = "°C"
    PERCENT = "%"


MEASURE_UNITS: dict[MeasureName, Unit] = {
    MeasureName.TEMPERATURE: Unit.CELSIUS,
    MeasureName.HUMIDITY: Unit.PERCENT,
}
