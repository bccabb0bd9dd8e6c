"""Log entry domain model."""

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..utils.datetime import from_iso, normalize_timestamp


class LogEntry(BaseModel):
    """A single timestamped log entry."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: str  # Normalized UTC ISO-8601, e.g. "2024-05-01T08:30:00.000Z"

    @property
    def instant(self) -> datetime:
        """The timestamp as an aware datetime."""
        return from_iso(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the dict stored in the mirror and the remote document."""
        return {"id": self.id, "timestamp": self.timestamp}

    @classmethod
    def sanitize(cls, raw: Any) -> "LogEntry | None":
        """Build an entry from untrusted data.

        Returns None when the id is not a finite integer or the timestamp
        does not parse. Numeric timestamps are epoch milliseconds. Valid
        timestamps are normalized.
        """
        if not isinstance(raw, dict):
            return None
        entry_id = coerce_id(raw.get("id"))
        if entry_id is None:
            return None
        timestamp = raw.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, str | datetime | int | float):
            return None
        normalized = normalize_timestamp(timestamp)
        if normalized is None:
            return None
        return cls(id=entry_id, timestamp=normalized)


def sanitize_entries(raw: Any) -> list[LogEntry]:
    """Sanitize a decoded JSON array, silently dropping invalid elements."""
    if not isinstance(raw, list):
        return []
    entries = (LogEntry.sanitize(item) for item in raw)
    return [entry for entry in entries if entry is not None]


def coerce_id(value: Any) -> int | None:
    """Coerce an id to int, rejecting bools, non-finite and fractional numbers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return coerce_id(float(value.strip()))
        except ValueError:
            return None
    return None
