"""Settings models and configuration loading for the RPi monitoring service."""

from functools import cached_property, lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from rpimon.lib.exceptions import ConfigurationError

# Default is 15 minutes
DEFAULT_REFRESH_SEC = 900

# The DHT22 measures at most every 2 seconds, faster polls return stale data
DHT22_MIN_INTERVAL_SEC = 2.0
DEFAULT_READ_INTERVAL_SEC = 2.1


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


def _validate_http_url_or_empty(v: str) -> str:
    """Validate HTTP URL format, allowing empty string."""
    if not v:
        return v
    HttpUrl(v)
    return v


def _validate_log_level(v: str) -> str:
    """Normalize and validate a logging level name."""
    level = v.strip().upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(f"Unknown log level: {v}")
    return level


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]
_HttpUrlOrEmpty = Annotated[str, AfterValidator(_validate_http_url_or_empty)]
_LogLevel = Annotated[str, AfterValidator(_validate_log_level)]


class PollingSettings(BaseModel):
    """Scheduler settings."""

    model_config = ConfigDict(frozen=True)

    frequency_sec: int = DEFAULT_REFRESH_SEC


class ReadPolicy(BaseModel):
    """Retry policy for reading a single sensor within one cycle.

    With neither ``max_attempts`` nor ``deadline_sec`` set, the reader keeps
    trying until the sensor answers.
    """

    model_config = ConfigDict(frozen=True)

    interval_sec: float = Field(default=DEFAULT_READ_INTERVAL_SEC, gt=0)
    max_attempts: int | None = Field(default=None, ge=1)
    deadline_sec: float | None = Field(default=None, gt=0)

    @property
    def is_bounded(self) -> bool:
        return self.max_attempts is not None or self.deadline_sec is not None

    def exhausted(self, attempts: int, next_attempt_at_sec: float) -> bool:
        """Whether another attempt is disallowed.

        Args:
            attempts: Number of attempts made so far.
            next_attempt_at_sec: Seconds since the first attempt at which
                the next attempt would start.
        """
        if self.max_attempts is not None and attempts >= self.max_attempts:
            return True
        if self.deadline_sec is not None and next_attempt_at_sec > self.deadline_sec:
            return True
        return False


class GraphiteSettings(BaseModel):
    """Metrics endpoint settings."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = ""
    api_key: SecretStr = SecretStr("")
    timeout_sec: float = 30.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scheduling
    refresh_time: int = Field(default=DEFAULT_REFRESH_SEC, gt=0)

    # Sensors
    sensors_config_path: Path = Path("sensors.yaml")
    mock_sensors: _BoolFromStr = False
    read_interval_sec: float = Field(
        default=DEFAULT_READ_INTERVAL_SEC, ge=DHT22_MIN_INTERVAL_SEC
    )
    read_max_attempts: int | None = Field(default=None, ge=1)
    read_deadline_sec: float | None = Field(default=None, gt=0)

    # Metrics endpoint
    graphite_endpoint: _HttpUrlOrEmpty = ""
    grafana_api_key: SecretStr = SecretStr("")
    submit_timeout_sec: float = Field(default=30.0, gt=0)

    # Misc
    debug: _BoolFromStr = False
    log_level: _LogLevel = "INFO"

    @cached_property
    def polling(self) -> PollingSettings:
        """Get scheduler settings."""
        return PollingSettings(frequency_sec=self.refresh_time)

    @cached_property
    def read_policy(self) -> ReadPolicy:
        """Get the per-sensor read retry policy."""
        return ReadPolicy(
            interval_sec=self.read_interval_sec,
            max_attempts=self.read_max_attempts,
            deadline_sec=self.read_deadline_sec,
        )

    @cached_property
    def graphite(self) -> GraphiteSettings:
        """Get metrics endpoint settings as nested object."""
        return GraphiteSettings(
            endpoint=self.graphite_endpoint,
            api_key=self.grafana_api_key,
            timeout_sec=self.submit_timeout_sec,
        )


def validate_serve_config(settings: Settings) -> None:
    """Check the settings the ``serve`` command cannot run without.

    Raises:
        ConfigurationError: Listing every missing value.
    """
    missing = []
    if not settings.graphite_endpoint:
        missing.append("GRAPHITE_ENDPOINT")
    if not settings.grafana_api_key.get_secret_value():
        missing.append("GRAFANA_API_KEY")
    if missing:
        raise ConfigurationError(
            f"Configuration validation failed, missing: {', '.join(missing)}"
        )


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from rpimon.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
