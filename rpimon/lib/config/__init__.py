"""Centralized configuration for the RPi monitoring service.

This package provides:
- Enums for measure names and units
- Pydantic settings models for configuration
- Loading of the static sensor list
"""

from .enums import MEASURE_UNITS, MeasureName, Unit
from .sensors import Sensor, load_sensors
from .settings import (
    DEFAULT_READ_INTERVAL_SEC,
    DEFAULT_REFRESH_SEC,
    GraphiteSettings,
    PollingSettings,
    ReadPolicy,
    Settings,
    get_settings,
    validate_serve_config,
)

__all__ = [
    # Enums
    "MEASURE_UNITS",
    "MeasureName",
    "Unit",
    # Settings models
    "GraphiteSettings",
    "PollingSettings",
    "ReadPolicy",
    "Settings",
    "Sensor",
    # Constants
    "DEFAULT_READ_INTERVAL_SEC",
    "DEFAULT_REFRESH_SEC",
    # Functions
    "get_settings",
    "load_sensors",
    "validate_serve_config",
]
