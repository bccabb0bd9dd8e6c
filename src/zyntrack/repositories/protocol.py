"""Protocol for the persistent mirror behind the log store."""

from typing import Protocol

LOGS_SLOT = "logs"
NEXT_ID_SLOT = "next-id"
SYNC_CONFIG_SLOT = "sync-config"


class StorageUnavailable(OSError):
    """The persistent mirror cannot be read or written."""


class MirrorProtocol(Protocol):
    """Interface for persistent string slots.

    The store keeps three independent slots: the entry array (JSON),
    the next-id counter (decimal string) and the sync config (JSON object).
    Implementations raise StorageUnavailable on any access failure.
    """

    @property
    def available(self) -> bool:
        """Whether the backing storage passed its availability probe."""
        ...

    def read(self, slot: str) -> str | None:
        """Return the slot's value, or None if it has never been written."""
        ...

    def write(self, slot: str, value: str) -> None:
        """Replace the slot's value."""
        ...

    def remove(self, slot: str) -> None:
        """Delete the slot. Does nothing if it does not exist."""
        ...
