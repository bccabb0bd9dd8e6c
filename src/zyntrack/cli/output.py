"""Terminal output helpers for the CLI."""

import sys
from typing import TextIO

from ..models import SyncState, SyncStatus

GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
RESET = "\033[0m"
CHECK = "✓"
BULLET = "•"
CROSS = "✗"


def _paint(text: str, color: str, stream: TextIO) -> str:
    """Wrap text in an ANSI color when the stream is a terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return f"{color}{text}{RESET}"
    return text


def _emit(symbol: str, color: str, message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(f"{_paint(symbol, color, stream)} {message}", file=stream)


def success(message: str) -> None:
    _emit(CHECK, GREEN, message)


def info(message: str) -> None:
    _emit(BULLET, YELLOW, message)


def error(message: str) -> None:
    """Print an error to stderr so it stays out of piped exports."""
    _emit(CROSS, RED, message, sys.stderr)


def header(message: str) -> None:
    print(_paint(message, BLUE, sys.stdout))


def describe_sync_state(state: SyncState) -> str:
    """One-line description of the sync state for the status display."""
    if not state.enabled:
        return "GitHub sync disabled. Using local storage only."
    if state.status == SyncStatus.SYNCING:
        return state.message or "Syncing with GitHub…"
    if state.status == SyncStatus.ERROR:
        if state.message:
            return f"Sync error: {state.message}"
        return "Sync error. Check your token or repository."
    return state.message or "GitHub sync ready."
