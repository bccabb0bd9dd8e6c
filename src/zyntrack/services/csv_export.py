"""CSV export of log entries."""

from collections.abc import Iterable

from ..models import LogEntry

CSV_HEADER = "id,timestamp"


def build_csv(entries: Iterable[LogEntry]) -> str:
    """Render entries as CSV, oldest first.

    Fields are not quoted: ids are integers and timestamps are ISO-8601,
    so neither can contain a comma.
    """
    rows = sorted(entries, key=lambda entry: entry.instant)
    return "\n".join([CSV_HEADER, *(f"{entry.id},{entry.timestamp}" for entry in rows)])


def parse_csv(text: str) -> list[tuple[int, str]]:
    """Read an export back into (id, timestamp) pairs.

    Raises:
        ValueError: The header or a row is malformed
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines or lines[0].strip() != CSV_HEADER:
        raise ValueError(f"Expected header {CSV_HEADER!r}")

    rows: list[tuple[int, str]] = []
    for number, line in enumerate(lines[1:], start=2):
        entry_id, sep, timestamp = line.strip().partition(",")
        if not sep or not timestamp:
            raise ValueError(f"Line {number}: expected 'id,timestamp', got {line!r}")
        rows.append((int(entry_id), timestamp))
    return rows
