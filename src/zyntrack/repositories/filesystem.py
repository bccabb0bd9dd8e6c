"""Filesystem-backed mirror for the log store."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .protocol import LOGS_SLOT, NEXT_ID_SLOT, SYNC_CONFIG_SLOT, StorageUnavailable

logger = logging.getLogger(__name__)


class FilesystemMirror:
    """
    Mirror storing each slot as a file in a data directory.

    Writes go to a temporary file first and are moved into place, so a
    crash never leaves a half-written slot behind.
    """

    SLOT_FILES = {
        LOGS_SLOT: "logs.json",
        NEXT_ID_SLOT: "next-id",
        SYNC_CONFIG_SLOT: "sync-config.json",
    }
    PROBE_FILE = ".probe"

    def __init__(self, data_dir: Path) -> None:
        """
        Initialize the mirror and probe that the directory is writable.

        Args:
            data_dir: Directory holding the slot files (created if missing)
        """
        self.data_dir = data_dir
        self._available = self._probe()

    @property
    def available(self) -> bool:
        return self._available

    def read(self, slot: str) -> str | None:
        filepath = self._slot_path(slot)
        try:
            return filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailable(f"Cannot read {filepath}: {e}") from e

    def write(self, slot: str, value: str) -> None:
        filepath = self._slot_path(slot)
        tmp_path = filepath.with_name(filepath.name + ".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, filepath)
        except OSError as e:
            raise StorageUnavailable(f"Cannot write {filepath}: {e}") from e

    def remove(self, slot: str) -> None:
        filepath = self._slot_path(slot)
        try:
            filepath.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot remove {filepath}: {e}") from e

    # --- Private Methods ---

    def _slot_path(self, slot: str) -> Path:
        try:
            return self.data_dir / self.SLOT_FILES[slot]
        except KeyError:
            raise ValueError(f"Unknown mirror slot: {slot}") from None

    def _probe(self) -> bool:
        """Write and delete a probe file to check the directory is usable."""
        probe = self.data_dir / self.PROBE_FILE
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            probe.write_text("1")
            probe.unlink()
        except OSError as e:
            logger.warning("Local storage unavailable at %s: %s", self.data_dir, e)
            return False
        return True
