"""Shared utility functions."""
from datetime import UTC, datetime


def unix_now() -> int:
    """Return the current wall-clock time as integer unix seconds."""
    return int(datetime.now(UTC).timestamp())
