"""Shared plumbing for commands that operate on the log store."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..config import Settings
from ..github.client import RemoteConfigError, RemoteError
from ..services import LogStore, LogStoreError
from .output import error, info

logger = logging.getLogger(__name__)

StoreAction = Callable[[LogStore], Awaitable[None]]


def run_with_store(settings: Settings, action: StoreAction) -> int:
    """Open the store, run one action against it, and map errors to exit codes.

    Returns:
        Exit code (0 for success, non-zero for error)
    """

    async def _main() -> int:
        async with LogStore.from_settings(settings) as store:
            if not store.storage_available:
                info(f"Local storage at {settings.data_dir} unavailable; changes won't persist")
            try:
                await action(store)
            except LogStoreError as e:
                error(str(e))
                return 1
            except RemoteConfigError as e:
                error(f"Sync configuration error: {e}")
                return 1
            except RemoteError as e:
                logger.debug("Remote operation failed", exc_info=True)
                error(f"Sync error: {e}")
                info("Nothing was changed locally. Run 'zyntrack sync reload' and retry.")
                return 1
        return 0

    return asyncio.run(_main())
