"""Loading of the static sensor list (``sensors.yaml``).

The file is a YAML list of ``{name, pin}`` records::

    - name: livingroom
      pin: 4
    - name: attic
      pin: 17
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from rpimon.lib.exceptions import ConfigurationError
from rpimon.logging import get_logger

logger = get_logger("lib.config.sensors")


class Sensor(BaseModel):
    """A DHT22 sensor wired to a GPIO pin."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    pin: int = Field(ge=0, le=255)


_SENSOR_LIST = TypeAdapter(list[Sensor])


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(f"Sensors config file not found: {path}") from e
    except PermissionError as e:
        raise ConfigurationError(
            f"Insufficient permissions to read sensors config file: {path}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Unable to read sensors config file at {path}: {e}"
        ) from e


def load_sensors(path: str | Path) -> list[Sensor]:
    """Load and validate the sensor list.

    Args:
        path: Path to the YAML sensor list.

    Returns:
        Sensors in file order. An empty list is valid.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    raw = _read_file(path)

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid sensors YAML file {path}: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError(
            f"Invalid sensors YAML file {path}: expected a list of sensors, "
            f"got {type(data).__name__}"
        )

    try:
        sensors = _SENSOR_LIST.validate_python(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid sensor entry in {path}: {e}") from e

    names = [sensor.name for sensor in sensors]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Duplicate sensor names in {path}: {', '.join(duplicates)}"
        )

    logger.info("Loaded %d sensor(s) from %s", len(sensors), path)
    return sensors
