"""Logging configuration for the RPi monitoring service."""

import logging
import sys

_configured = False

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"


def configure(level: int | str = logging.INFO) -> None:
    """Configure logging for the application.

    Safe to call multiple times - only configures once.
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("rpimon")
    root.setLevel(level)
    root.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the 'rpimon' namespace.

    Args:
        name: Logger name (will be prefixed with 'rpimon.')

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(f"rpimon.{name}")


def set_level(level: int | str) -> None:
    """Change the level of the 'rpimon' logger after configuration."""
    logging.getLogger("rpimon").setLevel(level)
