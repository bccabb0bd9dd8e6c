"""Sync commands for binding the store to a GitHub document."""

from ..config import Settings
from ..models import SyncConfig
from ..services import LogStore
from .output import describe_sync_state, header, info, success
from .runner import run_with_store


def run_sync_configure(
    settings: Settings,
    owner: str,
    repo: str,
    branch: str | None = None,
    path: str | None = None,
    token: str | None = None,
) -> int:
    """Save a sync config and pull the remote document.

    Args:
        settings: Application settings
        owner: Repository owner
        repo: Repository name
        branch: Branch holding the document (default: main)
        path: Path of the document (default: data/logs.json)
        token: GitHub token; an empty token disables sync

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    config = SyncConfig(owner=owner, repo=repo, branch=branch, path=path, token=token)

    async def _configure(store: LogStore) -> None:
        if config.enabled:
            header(f"Connecting to {config.repository}:{config.path}@{config.branch}...")
        await store.save_config(config)
        if store.config is None:
            info(describe_sync_state(store.sync_state))
            return
        success(describe_sync_state(store.sync_state))
        info(f"{len(store.get_all())} log(s) available")

    return run_with_store(settings, _configure)


def run_sync_clear(settings: Settings) -> int:
    """Disable sync and fall back to local storage."""

    async def _clear(store: LogStore) -> None:
        await store.clear_config()
        success(describe_sync_state(store.sync_state))

    return run_with_store(settings, _clear)


def run_sync_reload(settings: Settings) -> int:
    """Replace local logs with the GitHub document."""

    async def _reload(store: LogStore) -> None:
        if store.config is None:
            info(describe_sync_state(store.sync_state))
            return
        header("Reloading from GitHub...")
        entries = await store.reload_from_remote()
        success(f"{describe_sync_state(store.sync_state)} ({len(entries)} log(s))")

    return run_with_store(settings, _reload)


def run_sync_status(settings: Settings) -> int:
    """Print the current sync configuration and state."""

    async def _status(store: LogStore) -> None:
        state = store.sync_state
        config = store.config
        if config is not None:
            print(f"Repository: {config.repository}")
            print(f"Branch:     {config.branch}")
            print(f"Path:       {config.path}")
        if state.last_synced_at is not None:
            print(f"Last sync:  {state.last_synced_at.isoformat()}")
        info(describe_sync_state(state))

    return run_with_store(settings, _status)
