"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Timestamps are stored without an offset; every stored value is UTC.
    """
    return datetime.now(UTC).replace(tzinfo=None)
