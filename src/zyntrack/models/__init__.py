"""Data models."""

from .log_entry import LogEntry, coerce_id, sanitize_entries
from .stats import PeriodCount, StatsReport
from .sync import DEFAULT_BRANCH, DEFAULT_PATH, SyncConfig, SyncState, SyncStatus

__all__ = [
    "DEFAULT_BRANCH",
    "DEFAULT_PATH",
    "LogEntry",
    "PeriodCount",
    "StatsReport",
    "SyncConfig",
    "SyncState",
    "SyncStatus",
    "coerce_id",
    "sanitize_entries",
]
