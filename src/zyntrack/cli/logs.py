"""Log commands: add, list, update, remove, stats and export."""

from __future__ import annotations

from pathlib import Path

from ..config import Settings
from ..models import PeriodCount
from ..services import LogStore
from ..utils import now_utc, to_iso
from .output import header, info, success
from .runner import run_with_store


def run_add(settings: Settings, timestamp: str | None = None) -> int:
    """Record a log entry, at the given time or now."""

    async def _add(store: LogStore) -> None:
        entry = await store.add_log(timestamp or to_iso(now_utc()))
        success(f"Logged #{entry.id} at {entry.timestamp}")

    return run_with_store(settings, _add)


def run_update(settings: Settings, entry_id: int, timestamp: str) -> int:
    """Change the timestamp of a log entry."""

    async def _update(store: LogStore) -> None:
        entry = await store.update_log(entry_id, timestamp)
        success(f"Updated #{entry.id} to {entry.timestamp}")

    return run_with_store(settings, _update)


def run_remove(settings: Settings, entry_id: int) -> int:
    """Delete a log entry."""

    async def _remove(store: LogStore) -> None:
        await store.remove_log(entry_id)
        success(f"Removed #{entry_id}")

    return run_with_store(settings, _remove)


def run_list(settings: Settings) -> int:
    """Print all entries, newest first."""

    async def _list(store: LogStore) -> None:
        entries = store.get_all()
        if not entries:
            info("No logs yet")
            return
        header(f"{len(entries)} log(s):")
        for entry in entries:
            print(f"  #{entry.id:<6} {entry.timestamp}")

    return run_with_store(settings, _list)


def run_stats(settings: Settings, window: str | None = None) -> int:
    """Print daily, weekly and monthly counts."""

    async def _stats(store: LogStore) -> None:
        report = store.calculate_stats(window)
        _print_buckets("Daily", report.daily)
        _print_buckets("Weekly", report.weekly)
        _print_buckets("Monthly", report.monthly)

    return run_with_store(settings, _stats)


def run_export(settings: Settings, output: Path | None = None) -> int:
    """Write the CSV export to a file or stdout."""

    async def _export(store: LogStore) -> None:
        csv_text = store.build_csv()
        if output is None:
            print(csv_text)
            return
        output.write_text(csv_text + "\n", encoding="utf-8")
        success(f"Exported {len(store.get_all())} log(s) to {output}")

    return run_with_store(settings, _export)


def _print_buckets(title: str, buckets: list[PeriodCount]) -> None:
    print()
    header(f"{title}:")
    if not buckets:
        info("No data")
        return
    for bucket in buckets:
        print(f"  {bucket.period:<12} {bucket.count}")

