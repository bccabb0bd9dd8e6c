"""Repository layer for the local mirror."""

from .filesystem import FilesystemMirror
from .protocol import (
    LOGS_SLOT,
    NEXT_ID_SLOT,
    SYNC_CONFIG_SLOT,
    MirrorProtocol,
    StorageUnavailable,
)

__all__ = [
    "LOGS_SLOT",
    "NEXT_ID_SLOT",
    "SYNC_CONFIG_SLOT",
    "FilesystemMirror",
    "MirrorProtocol",
    "StorageUnavailable",
]
