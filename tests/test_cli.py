"""Tests for the command line interface."""

from pathlib import Path

import pytest

from zyntrack.__main__ import main
from zyntrack.cli.output import describe_sync_state, error, info, success
from zyntrack.models import SyncState, SyncStatus


def _run(data_dir: Path, *args: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(["--data-dir", str(data_dir), *args])
    return exc_info.value.code


class TestOutput:
    """Tests for output helpers."""

    def test_success_prints_checkmark(self, capsys):
        success("Saved")
        assert capsys.readouterr().out == "✓ Saved\n"

    def test_info_prints_bullet(self, capsys):
        info("Note")
        assert capsys.readouterr().out == "• Note\n"

    def test_error_prints_cross(self, capsys):
        error("Failed")
        assert capsys.readouterr().err == "✗ Failed\n"

    def test_describe_disabled(self):
        assert describe_sync_state(SyncState()).startswith("GitHub sync disabled")

    def test_describe_error(self):
        state = SyncState(enabled=True, status=SyncStatus.ERROR, message="Bad credentials")
        assert describe_sync_state(state) == "Sync error: Bad credentials"

    def test_describe_error_without_message(self):
        state = SyncState(enabled=True, status=SyncStatus.ERROR)
        assert "Check your token" in describe_sync_state(state)


class TestLogCommands:
    """Tests for add, list, update, remove, stats and export."""

    def test_add_and_list(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "add", "2024-05-01T08:00:00Z") == 0
        assert _run(tmp_path, "add", "2024-05-02T08:00:00Z") == 0
        capsys.readouterr()

        assert _run(tmp_path, "list") == 0

        out = capsys.readouterr().out
        assert "2 log(s):" in out
        assert out.index("2024-05-02T08:00:00.000Z") < out.index("2024-05-01T08:00:00.000Z")

    def test_add_defaults_to_now(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "add") == 0
        assert "Logged #1 at" in capsys.readouterr().out

    def test_add_invalid_timestamp(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "add", "yesterday-ish") == 1
        assert "Invalid timestamp" in capsys.readouterr().err

    def test_list_empty(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "list") == 0
        assert "No logs yet" in capsys.readouterr().out

    def test_update_and_remove(self, tmp_path: Path, capsys):
        _run(tmp_path, "add", "2024-05-01T08:00:00Z")

        assert _run(tmp_path, "update", "1", "2024-05-03T10:00:00Z") == 0
        assert "Updated #1 to 2024-05-03T10:00:00.000Z" in capsys.readouterr().out

        assert _run(tmp_path, "remove", "1") == 0
        assert _run(tmp_path, "list") == 0
        assert "No logs yet" in capsys.readouterr().out

    def test_remove_unknown_id(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "remove", "7") == 1
        assert "Log not found." in capsys.readouterr().err

    def test_stats(self, tmp_path: Path, capsys):
        _run(tmp_path, "add")
        _run(tmp_path, "add", "2020-01-15T12:00:00Z")
        capsys.readouterr()

        assert _run(tmp_path, "stats", "--window", "7") == 0

        out = capsys.readouterr().out
        assert "Daily:" in out
        assert "Weekly:" in out
        assert "2020-03" in out
        assert "2020-01 " in out

    def test_export_to_stdout(self, tmp_path: Path, capsys):
        _run(tmp_path, "add", "2024-05-02T08:00:00Z")
        _run(tmp_path, "add", "2024-05-01T08:00:00Z")
        capsys.readouterr()

        assert _run(tmp_path, "export") == 0

        assert capsys.readouterr().out == (
            "id,timestamp\n2,2024-05-01T08:00:00.000Z\n1,2024-05-02T08:00:00.000Z\n"
        )

    def test_export_to_file(self, tmp_path: Path):
        target = tmp_path / "out.csv"
        _run(tmp_path / "data", "add", "2024-05-01T08:00:00Z")

        assert _run(tmp_path / "data", "export", "-o", str(target)) == 0
        assert target.read_text() == "id,timestamp\n1,2024-05-01T08:00:00.000Z\n"


class TestSyncCommands:
    """Tests for sync commands that need no network."""

    def test_status_when_disabled(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "sync", "status") == 0
        assert "GitHub sync disabled" in capsys.readouterr().out

    def test_configure_without_token_disables(self, tmp_path: Path, capsys, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        assert _run(tmp_path, "sync", "configure", "--owner", "octo", "--repo", "tracker") == 0

        assert "GitHub sync disabled" in capsys.readouterr().out
        assert not (tmp_path / "sync-config.json").exists()

    def test_reload_without_config(self, tmp_path: Path, capsys):
        assert _run(tmp_path, "sync", "reload") == 0
        assert "GitHub sync disabled" in capsys.readouterr().out

    def test_clear(self, tmp_path: Path, capsys):
        (tmp_path / "sync-config.json").write_text('{"owner": "octo", "repo": "t", "token": ""}')

        assert _run(tmp_path, "sync", "clear") == 0
        assert not (tmp_path / "sync-config.json").exists()
