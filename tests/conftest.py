"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import pytest

from zyntrack.github.client import RemoteConflictError
from zyntrack.models import LogEntry, SyncConfig, sanitize_entries
from zyntrack.repositories import FilesystemMirror


class FakeContentsRemote:
    """In-memory stand-in for the GitHub contents API.

    Every successful push bumps the sha; a push presenting any other sha
    than the current one is rejected as a conflict, like GitHub does.
    """

    def __init__(self, document: list[dict] | None = None) -> None:
        self.document = document
        self.version = 0
        self.sha: str | None = "v0" if document is not None else None
        self.calls: list[str] = []
        self.messages: list[str] = []
        self.fail_next: Exception | None = None
        self.fetch_gate: asyncio.Event | None = None
        self.push_gate: asyncio.Event | None = None
        self.closed = False

    async def fetch_remote(self, config: SyncConfig) -> tuple[list[LogEntry], str | None]:
        self.calls.append("fetch")
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        self._maybe_fail()
        if self.document is None:
            return [], None
        return sanitize_entries(self.document), self.sha

    async def push_remote(
        self,
        config: SyncConfig,
        snapshot: Sequence[LogEntry],
        sha: str | None,
        message: str,
    ) -> str:
        self.calls.append("push")
        if self.push_gate is not None:
            await self.push_gate.wait()
        self._maybe_fail()
        if sha != self.sha:
            raise RemoteConflictError("logs.json does not match " + str(sha), 409)
        self.version += 1
        self.sha = f"v{self.version}"
        self.document = [entry.to_dict() for entry in snapshot]
        self.messages.append(message)
        return self.sha

    async def aclose(self) -> None:
        self.closed = True

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory for the local mirror."""
    return tmp_path / "data"


@pytest.fixture
def mirror(data_dir: Path) -> FilesystemMirror:
    """Filesystem mirror in a temporary directory."""
    return FilesystemMirror(data_dir)


@pytest.fixture
def sync_config() -> SyncConfig:
    """A complete sync config."""
    return SyncConfig(owner="octo", repo="tracker", token="secret-token")


@pytest.fixture
def remote() -> FakeContentsRemote:
    """Remote holding one entry at version v0."""
    return FakeContentsRemote([{"id": 1, "timestamp": "2024-03-01T09:00:00.000Z"}])


@pytest.fixture
def make_remote():
    """Factory for fake remotes with a given document (None = no document yet)."""
    return FakeContentsRemote
