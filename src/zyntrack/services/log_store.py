"""Local-first log store with optional GitHub sync."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Any

from ..github.client import GitHubContentsClient, RemoteConfigError, RemoteError
from ..models import (
    LogEntry,
    StatsReport,
    SyncConfig,
    SyncState,
    coerce_id,
    sanitize_entries,
)
from ..repositories import (
    LOGS_SLOT,
    NEXT_ID_SLOT,
    SYNC_CONFIG_SLOT,
    FilesystemMirror,
    MirrorProtocol,
    StorageUnavailable,
)
from ..utils import normalize_timestamp
from . import stats
from .csv_export import build_csv
from .notifier import Notifier, Unsubscribe
from .sync_state import SyncStateMachine

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

Snapshot = tuple[LogEntry, ...]


class LogStoreError(Exception):
    """Base exception for log store errors."""

    pass


class InvalidTimestamp(LogStoreError, ValueError):
    """The timestamp could not be parsed."""

    def __init__(self) -> None:
        super().__init__("Invalid timestamp. Please pick a valid date and time.")


class NotFound(LogStoreError, LookupError):
    """No log entry has the requested id."""

    def __init__(self, entry_id: object) -> None:
        super().__init__("Log not found.")
        self.entry_id = entry_id


@dataclass
class _StoreState:
    """Everything one store instance owns."""

    entries: Snapshot = ()
    next_id: int = 1
    config: SyncConfig | None = None
    sha: str | None = None
    storage_available: bool = False


class LogStore:
    """
    Authoritative in-memory cache of log entries.

    The cache is mirrored to persistent storage on a best-effort basis and,
    when a sync config with a token is saved, to a JSON document on GitHub.
    With sync enabled a change is pushed first and only applied locally
    once GitHub accepts it. At most one GitHub round-trip runs at a time.
    """

    def __init__(
        self,
        mirror: MirrorProtocol | None = None,
        client: GitHubContentsClient | None = None,
    ) -> None:
        """
        Initialize the store. Call load() or open() before use.

        Args:
            mirror: Persistent mirror; None keeps everything in memory
            client: GitHub client; created on first use if not given
        """
        self._mirror = mirror
        self._client = client
        self._state = _StoreState(storage_available=mirror is not None and mirror.available)
        self._lock = asyncio.Lock()
        self._sync = SyncStateMachine()
        self._log_notifier: Notifier[list[LogEntry]] = Notifier(self.get_all)

    @classmethod
    def from_settings(cls, settings: Settings) -> LogStore:
        """Create a store backed by the data directory and API from settings."""
        return cls(
            mirror=FilesystemMirror(settings.data_dir),
            client=GitHubContentsClient(settings.api_url, timeout=settings.timeout),
        )

    async def __aenter__(self) -> LogStore:
        await self.open()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the GitHub client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- Startup ---

    def load(self) -> None:
        """Read entries, the id counter and the sync config from the mirror."""
        self._read_local()

        config = self._read_config()
        self._state.config = config if config is not None and config.enabled else None
        self._state.sha = None
        if self._state.config is not None:
            self._sync.enable()
        else:
            self._sync.disable()

        logger.info(
            "Loaded %d logs (next id %d, sync %s)",
            len(self._state.entries),
            self._state.next_id,
            "enabled" if self._state.config else "disabled",
        )
        self._publish_logs()

    async def open(self) -> None:
        """Load local data, then pull from GitHub if sync is configured.

        A failed pull is logged and left in the sync state; the store
        stays usable on local data.
        """
        self.load()
        if self._state.config is None:
            return
        try:
            await self.reload_from_remote()
        except (RemoteError, RemoteConfigError) as e:
            logger.warning("Initial sync with GitHub failed: %s", e)

    async def refresh_from_mirror(self) -> None:
        """Re-read the mirror after another process changed it."""
        async with self._lock:
            self._read_local()
            self._publish_logs()

    # --- Accessors ---

    @property
    def config(self) -> SyncConfig | None:
        return self._state.config

    @property
    def sync_state(self) -> SyncState:
        return self._sync.state

    @property
    def storage_available(self) -> bool:
        return self._state.storage_available

    @property
    def next_id(self) -> int:
        return self._state.next_id

    def get_all(self) -> list[LogEntry]:
        """Entries newest first."""
        return sorted(self._state.entries, key=lambda entry: entry.instant, reverse=True)

    def get_chronological(self) -> list[LogEntry]:
        """Entries oldest first."""
        return sorted(self._state.entries, key=lambda entry: entry.instant)

    def build_csv(self) -> str:
        return build_csv(self._state.entries)

    def calculate_stats(
        self,
        window_days: int | str | None = stats.DEFAULT_WINDOW_DAYS,
        now: datetime | None = None,
        tz: tzinfo | None = None,
    ) -> StatsReport:
        return stats.calculate_stats(self.get_chronological(), window_days, now, tz)

    def subscribe(self, listener: Callable[[list[LogEntry]], None]) -> Unsubscribe:
        """Subscribe to log snapshots; the current one is replayed at once."""
        return self._log_notifier.subscribe(listener)

    def subscribe_sync(self, listener: Callable[[SyncState], None]) -> Unsubscribe:
        """Subscribe to sync state changes; the current state is replayed at once."""
        return self._sync.subscribe(listener)

    # --- Mutations ---

    async def add_log(self, timestamp: str | datetime | float) -> LogEntry:
        """Record a new entry.

        Raises:
            InvalidTimestamp: timestamp does not parse
            RemoteError: GitHub rejected the change (nothing was applied)
        """
        iso = _ensure_timestamp(timestamp)
        async with self._lock:
            entry = LogEntry(id=self._state.next_id, timestamp=iso)
            self._state.next_id += 1
            await self._commit((*self._state.entries, entry), f"Add log {entry.id}")
        logger.info("Log added: %d at %s", entry.id, entry.timestamp)
        return entry

    async def update_log(self, entry_id: int | str, timestamp: str | datetime | float) -> LogEntry:
        """Change the timestamp of an existing entry.

        Raises:
            InvalidTimestamp: timestamp does not parse
            NotFound: no entry has this id
            RemoteError: GitHub rejected the change (nothing was applied)
        """
        iso = _ensure_timestamp(timestamp)
        entry_id = _ensure_id(entry_id)
        async with self._lock:
            index = self._index_of(entry_id)
            updated = self._state.entries[index].model_copy(update={"timestamp": iso})
            snapshot = list(self._state.entries)
            snapshot[index] = updated
            await self._commit(tuple(snapshot), f"Update log {entry_id}")
        logger.info("Log updated: %d to %s", entry_id, iso)
        return updated

    async def remove_log(self, entry_id: int | str) -> None:
        """Delete an entry.

        Raises:
            NotFound: no entry has this id
            RemoteError: GitHub rejected the change (nothing was applied)
        """
        entry_id = _ensure_id(entry_id)
        async with self._lock:
            index = self._index_of(entry_id)
            entries = self._state.entries
            await self._commit(entries[:index] + entries[index + 1 :], f"Remove log {entry_id}")
        logger.info("Log removed: %d", entry_id)

    # --- Sync configuration ---

    async def save_config(self, config: SyncConfig) -> None:
        """Bind a new GitHub target and pull its document.

        A config without a token turns sync off instead.

        Raises:
            RemoteConfigError: owner or repo missing (nothing was saved)
            RemoteError: The initial pull failed (config stays saved)
        """
        if not config.enabled:
            await self.clear_config()
            return

        missing = config.missing_fields()
        if missing:
            raise RemoteConfigError(f"GitHub sync config is missing: {', '.join(missing)}")

        async with self._lock:
            self._mirror_write(SYNC_CONFIG_SLOT, config.model_dump_json())
            self._state.config = config
            self._state.sha = None
            logger.info(
                "Sync configured for %s:%s@%s", config.repository, config.path, config.branch
            )
            await self._reload_locked(reset=True)

    async def clear_config(self) -> None:
        """Turn sync off and fall back to the locally mirrored entries."""
        async with self._lock:
            self._mirror_remove(SYNC_CONFIG_SLOT)
            self._state.config = None
            self._state.sha = None
            self._sync.disable()
            self._read_local()
            logger.info("Sync disabled; using local storage only")
            self._publish_logs()

    async def reload_from_remote(self) -> list[LogEntry]:
        """Replace the cache with the GitHub document.

        Raises:
            RemoteConfigError: Sync is not configured
            RemoteError: The pull failed (cache untouched)
        """
        async with self._lock:
            await self._reload_locked()
        return self.get_all()

    # --- Private Methods ---

    def _index_of(self, entry_id: int) -> int:
        for index, entry in enumerate(self._state.entries):
            if entry.id == entry_id:
                return index
        raise NotFound(entry_id)

    def _remote(self) -> GitHubContentsClient:
        if self._client is None:
            self._client = GitHubContentsClient()
        return self._client

    async def _commit(self, snapshot: Snapshot, message: str) -> None:
        """Apply a snapshot, pushing it to GitHub first when sync is on."""
        config = self._state.config
        if config is None:
            self._apply(snapshot)
            return

        self._sync.begin()
        try:
            sha = await self._remote().push_remote(config, snapshot, self._state.sha, message)
            self._state.sha = sha
            self._apply(snapshot)
        except BaseException as e:
            # Cancellation included: the machine must never stay in syncing
            self._sync.fail(_failure_message(e))
            raise
        self._sync.succeed()

    async def _reload_locked(self, reset: bool = False) -> None:
        config = self._state.config
        if config is None:
            raise RemoteConfigError("GitHub sync is not configured.")

        self._sync.begin(reset=reset)
        try:
            entries, sha = await self._remote().fetch_remote(config)
            self._state.sha = sha
            if sha is None:
                # No document yet: local entries seed it on the next push
                snapshot = self._state.entries
                message = "No log file on GitHub yet; it will be created on the next change."
            else:
                snapshot = tuple(entries)
                message = f"Loaded {len(snapshot)} logs from GitHub."

            max_id = max((entry.id for entry in snapshot), default=0)
            self._state.next_id = max(self._state.next_id, max_id + 1)
            self._apply(snapshot)
        except BaseException as e:
            self._sync.fail(_failure_message(e))
            raise
        self._sync.succeed(message)

    def _apply(self, snapshot: Snapshot) -> None:
        """Replace the cache, mirror it, and notify subscribers."""
        self._state.entries = snapshot
        self._persist()
        self._publish_logs()

    def _publish_logs(self) -> None:
        self._log_notifier.publish(self.get_all())

    def _persist(self) -> None:
        payload = json.dumps([entry.to_dict() for entry in self._state.entries])
        self._mirror_write(LOGS_SLOT, payload)
        self._mirror_write(NEXT_ID_SLOT, str(self._state.next_id))

    def _read_local(self) -> None:
        """Load entries and the id counter from the mirror.

        With the mirror unavailable the in-memory cache is kept as is.
        """
        if not self._state.storage_available:
            return

        raw = self._mirror_read(LOGS_SLOT)
        entries: list[LogEntry] = []
        if raw:
            try:
                entries = sanitize_entries(json.loads(raw))
            except json.JSONDecodeError as e:
                self._degrade(e)
        self._state.entries = tuple(entries)

        stored_next = _parse_counter(self._mirror_read(NEXT_ID_SLOT))
        max_id = max((entry.id for entry in entries), default=0)
        if stored_next is not None and stored_next > max_id:
            self._state.next_id = stored_next
        else:
            self._state.next_id = max_id + 1
            self._mirror_write(NEXT_ID_SLOT, str(self._state.next_id))

    def _read_config(self) -> SyncConfig | None:
        raw = self._mirror_read(SYNC_CONFIG_SLOT)
        if not raw:
            return None
        try:
            return SyncConfig.model_validate_json(raw)
        except ValueError as e:
            logger.warning("Ignoring unreadable sync config: %s", e)
            return None

    def _mirror_read(self, slot: str) -> str | None:
        if not self._state.storage_available or self._mirror is None:
            return None
        try:
            return self._mirror.read(slot)
        except StorageUnavailable as e:
            self._degrade(e)
            return None

    def _mirror_write(self, slot: str, value: str) -> None:
        if not self._state.storage_available or self._mirror is None:
            return
        try:
            self._mirror.write(slot, value)
        except StorageUnavailable as e:
            self._degrade(e)

    def _mirror_remove(self, slot: str) -> None:
        if not self._state.storage_available or self._mirror is None:
            return
        try:
            self._mirror.remove(slot)
        except StorageUnavailable as e:
            self._degrade(e)

    def _degrade(self, error: Exception) -> None:
        logger.warning("Local storage unavailable, continuing in memory only: %s", error)
        self._state.storage_available = False


def _ensure_timestamp(value: str | datetime | float) -> str:
    normalized = normalize_timestamp(value)
    if normalized is None:
        raise InvalidTimestamp()
    return normalized


def _ensure_id(value: int | str) -> int:
    entry_id = coerce_id(value)
    if entry_id is None:
        raise NotFound(value)
    return entry_id


def _failure_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _parse_counter(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
