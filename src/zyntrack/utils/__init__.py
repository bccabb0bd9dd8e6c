"""Utility functions."""

from .datetime import from_iso, normalize_timestamp, now_utc, parse_instant, to_iso

__all__ = [
    "from_iso",
    "normalize_timestamp",
    "now_utc",
    "parse_instant",
    "to_iso",
]
