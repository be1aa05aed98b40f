"""Domain models for DHT22 sensor readings."""

import math
from dataclasses import asdict, dataclass
from typing import Any

from rpimon.lib.config import MEASURE_UNITS, MeasureName


@dataclass(frozen=True, slots=True)
class Reading:
    temperature: float
    humidity: float

    def __str__(self) -> str:
        return (
            f"{MeasureName.TEMPERATURE}={self.temperature}"
            f"{MEASURE_UNITS[MeasureName.TEMPERATURE]} "
            f"{MeasureName.HUMIDITY}={self.humidity}"
            f"{MEASURE_UNITS[MeasureName.HUMIDITY]}"
        )


@dataclass(frozen=True, slots=True)
class Datapoint:
    """A single Graphite datapoint, as posted to the metrics endpoint."""

    name: str
    interval: int
    value: float
    time: int

    def __post_init__(self) -> None:
        if not math.isfinite(self.value):
            raise ValueError(f"Datapoint {self.name} has non-finite value {self.value}")

    @classmethod
    def from_measure(
        cls,
        sensor_name: str,
        measure: MeasureName,
        value: float,
        *,
        resolution: int,
        timestamp: int,
    ) -> "Datapoint":
        return cls(
            name=f"{sensor_name}.{measure}",
            interval=int(resolution),
            value=float(value),
            time=int(timestamp),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def reading_to_datapoints(
    sensor_name: str, reading: Reading, *, resolution: int, timestamp: int
) -> list[Datapoint]:
    """Convert a reading into its temperature and humidity datapoints."""
    return [
        Datapoint.from_measure(
            sensor_name,
            name,
            getattr(reading, name),
            resolution=resolution,
            timestamp=timestamp,
        )
        for name in MeasureName
    ]
