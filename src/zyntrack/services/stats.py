"""Daily, weekly and monthly rollups of log entries.

Everything here is pure: the current time and the calendar time zone are
parameters, so results are deterministic.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, tzinfo

from ..models import LogEntry, PeriodCount, StatsReport
from ..utils import now_utc, parse_instant

DEFAULT_WINDOW_DAYS = 30
MIN_WINDOW_DAYS = 1
MAX_WINDOW_DAYS = 365
DAY_IN_MS = 24 * 60 * 60 * 1000

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_window(value: int | str | None) -> int:
    """Parse a window size and clamp it to [1, 365].

    Strings are read up to the first non-digit ("14d" is 14). Anything
    without a leading integer falls back to 30.
    """
    if isinstance(value, bool):
        days = DEFAULT_WINDOW_DAYS
    elif isinstance(value, int):
        days = value
    elif isinstance(value, str) and (match := _LEADING_INT.match(value)):
        days = int(match.group(1))
    else:
        days = DEFAULT_WINDOW_DAYS
    return max(MIN_WINDOW_DAYS, min(days, MAX_WINDOW_DAYS))


def daily_stats(
    entries: Iterable[LogEntry],
    window_days: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[PeriodCount]:
    """Count entries per calendar day over the last window_days days.

    Entries at or after now - window_days * 24h are kept. Buckets are
    sorted by their parsed date. A naive now is read as local time.
    """
    window_days = clamp_window(window_days)
    now = parse_instant(now) if now is not None else now_utc()
    cutoff = now - timedelta(milliseconds=window_days * DAY_IN_MS)

    grouped = _group(
        (entry for entry in entries if entry.instant >= cutoff),
        lambda day: day.isoformat(),
        tz,
    )
    return _materialize(grouped, sort_key=date.fromisoformat)


def iso_week_key(day: date) -> str:
    """Return the ISO-8601 week of a date as "YYYY-WW".

    The week belongs to the year of its Thursday, so the first or last
    days of a calendar year can land in the neighboring year's week
    (Friday 2021-01-01 is "2020-53").
    """
    thursday = day + timedelta(days=4 - day.isoweekday())
    day_of_year = (thursday - date(thursday.year, 1, 1)).days
    week = math.ceil((day_of_year + 1) / 7)
    return f"{thursday.year}-{week:02d}"


def weekly_stats(entries: Iterable[LogEntry], tz: tzinfo | None = None) -> list[PeriodCount]:
    """Count entries per ISO week, sorted by key string."""
    return _materialize(_group(entries, iso_week_key, tz))


def monthly_stats(entries: Iterable[LogEntry], tz: tzinfo | None = None) -> list[PeriodCount]:
    """Count entries per calendar month, sorted by key string."""
    return _materialize(_group(entries, lambda day: f"{day.year}-{day.month:02d}", tz))


def calculate_stats(
    entries: Iterable[LogEntry],
    window_days: int | str | None = DEFAULT_WINDOW_DAYS,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> StatsReport:
    """Build all three histograms for a set of entries."""
    entries = list(entries)
    return StatsReport(
        daily=daily_stats(entries, clamp_window(window_days), now, tz),
        weekly=weekly_stats(entries, tz),
        monthly=monthly_stats(entries, tz),
    )


def _local_date(entry: LogEntry, tz: tzinfo | None) -> date:
    # astimezone(None) converts to the system's local zone
    return entry.instant.astimezone(tz).date()


def _group(
    entries: Iterable[LogEntry],
    key_for: Callable[[date], str],
    tz: tzinfo | None,
) -> dict[str, int]:
    grouped: dict[str, int] = {}
    for entry in entries:
        key = key_for(_local_date(entry, tz))
        grouped[key] = grouped.get(key, 0) + 1
    return grouped


def _materialize(
    grouped: dict[str, int],
    sort_key: Callable[[str], object] | None = None,
) -> list[PeriodCount]:
    periods = sorted(grouped, key=sort_key)
    return [PeriodCount(period=period, count=grouped[period]) for period in periods]
