"""Utilities for datetime handling."""

import math
from datetime import UTC, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Convert datetime to a UTC ISO string with millisecond precision.

    Naive datetimes are interpreted as local time.
    """
    utc = dt.astimezone(UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def from_iso(value: str) -> datetime:
    """Parse ISO format string to an aware datetime."""
    # Handle both 'Z' suffix and explicit timezone
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def parse_instant(value: str | datetime | float) -> datetime | None:
    """Parse a timestamp into an aware datetime, or None if it cannot be parsed.

    Numbers are epoch milliseconds.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.astimezone()
    if isinstance(value, int | float) and not isinstance(value, bool):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return from_iso(value)
    except ValueError:
        return None


def normalize_timestamp(value: str | datetime | float) -> str | None:
    """Return the canonical UTC form of a timestamp, or None if it is invalid."""
    instant = parse_instant(value)
    if instant is None:
        return None
    return to_iso(instant)
