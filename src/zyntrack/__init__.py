"""Local-first log tracker with optional GitHub sync."""

__version__ = "0.1.0"
