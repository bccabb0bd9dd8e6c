"""Service layer for business logic."""

from .csv_export import build_csv, parse_csv
from .log_store import InvalidTimestamp, LogStore, LogStoreError, NotFound
from .notifier import Notifier
from .stats import calculate_stats, daily_stats, iso_week_key, monthly_stats, weekly_stats
from .sync_state import InvalidTransition, SyncStateMachine

__all__ = [
    "InvalidTimestamp",
    "InvalidTransition",
    "LogStore",
    "LogStoreError",
    "NotFound",
    "Notifier",
    "SyncStateMachine",
    "build_csv",
    "calculate_stats",
    "daily_stats",
    "iso_week_key",
    "monthly_stats",
    "parse_csv",
    "weekly_stats",
]
