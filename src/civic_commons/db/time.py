"""Time and identifier utilities for database models."""

from datetime import UTC, datetime
from uuid import uuid4


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh string primary key."""
    return str(uuid4())
