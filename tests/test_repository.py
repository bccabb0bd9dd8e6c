"""Integration tests for FilesystemMirror."""

from pathlib import Path
from unittest.mock import patch

import pytest

from zyntrack.repositories import (
    LOGS_SLOT,
    NEXT_ID_SLOT,
    SYNC_CONFIG_SLOT,
    FilesystemMirror,
    StorageUnavailable,
)


class TestFilesystemMirror:
    """Tests for FilesystemMirror."""

    def test_creates_missing_directory(self, tmp_path: Path):
        data_dir = tmp_path / "nested" / "data"
        mirror = FilesystemMirror(data_dir)

        assert mirror.available is True
        assert data_dir.is_dir()
        assert not (data_dir / FilesystemMirror.PROBE_FILE).exists()

    def test_read_missing_slot_returns_none(self, mirror: FilesystemMirror):
        assert mirror.read(LOGS_SLOT) is None

    def test_write_then_read(self, mirror: FilesystemMirror, data_dir: Path):
        mirror.write(LOGS_SLOT, '[{"id": 1}]')
        mirror.write(NEXT_ID_SLOT, "2")
        mirror.write(SYNC_CONFIG_SLOT, "{}")

        assert mirror.read(LOGS_SLOT) == '[{"id": 1}]'
        assert (data_dir / "logs.json").read_text() == '[{"id": 1}]'
        assert (data_dir / "next-id").read_text() == "2"
        assert (data_dir / "sync-config.json").exists()

    def test_write_leaves_no_temp_file(self, mirror: FilesystemMirror, data_dir: Path):
        mirror.write(LOGS_SLOT, "[]")
        assert sorted(p.name for p in data_dir.iterdir()) == ["logs.json"]

    def test_remove(self, mirror: FilesystemMirror):
        mirror.write(SYNC_CONFIG_SLOT, "{}")
        mirror.remove(SYNC_CONFIG_SLOT)
        assert mirror.read(SYNC_CONFIG_SLOT) is None

    def test_remove_missing_is_noop(self, mirror: FilesystemMirror):
        mirror.remove(SYNC_CONFIG_SLOT)

    def test_unknown_slot(self, mirror: FilesystemMirror):
        with pytest.raises(ValueError):
            mirror.read("bogus")

    def test_probe_failure_marks_unavailable(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        mirror = FilesystemMirror(blocker / "data")

        assert mirror.available is False

    def test_write_error_raises_storage_unavailable(self, mirror: FilesystemMirror):
        with (
            patch("pathlib.Path.write_text", side_effect=OSError("No space left on device")),
            pytest.raises(StorageUnavailable) as exc_info,
        ):
            mirror.write(LOGS_SLOT, "[]")
        assert "No space left" in str(exc_info.value)

    def test_read_error_raises_storage_unavailable(self, mirror: FilesystemMirror):
        with (
            patch("pathlib.Path.read_text", side_effect=PermissionError("denied")),
            pytest.raises(StorageUnavailable),
        ):
            mirror.read(LOGS_SLOT)
