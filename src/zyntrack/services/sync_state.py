"""Sync state machine for the log store."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..models import SyncState, SyncStatus
from ..utils import now_utc
from .notifier import Notifier, Unsubscribe

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "GitHub sync disabled. Using local storage only."
SYNCING_MESSAGE = "Syncing with GitHub…"
READY_MESSAGE = "GitHub sync ready."

# phase -> phases reachable from it
TRANSITIONS: dict[str, frozenset[str]] = {
    "disabled": frozenset({"disabled", "idle", "syncing"}),
    "idle": frozenset({"disabled", "idle", "syncing"}),
    "syncing": frozenset({"disabled", "idle", "error"}),
    "error": frozenset({"disabled", "idle", "syncing"}),
}


class InvalidTransition(Exception):
    """A sync state change that the state machine does not allow."""

    pass


class SyncStateMachine:
    """Tracks whether sync is disabled, idle, syncing or failed.

    Every transition is published to subscribers before the method
    returns, so observers always see the state matching the outcome of
    the operation that caused it.
    """

    def __init__(self) -> None:
        self._state = SyncState(enabled=False, message=DISABLED_MESSAGE)
        self._notifier: Notifier[SyncState] = Notifier(lambda: self._state)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def phase(self) -> str:
        return self._state.phase

    def subscribe(self, listener: Callable[[SyncState], None]) -> Unsubscribe:
        """Subscribe to state changes; the current state is replayed at once."""
        return self._notifier.subscribe(listener)

    # --- Transitions ---

    def disable(self) -> SyncState:
        """Sync turned off; the store runs on local data only."""
        return self._move(SyncState(enabled=False, message=DISABLED_MESSAGE))

    def enable(self, message: str = READY_MESSAGE) -> SyncState:
        """Sync configured and waiting for work."""
        return self._move(
            replace(self._state, enabled=True, status=SyncStatus.IDLE, message=message)
        )

    def begin(self, message: str = SYNCING_MESSAGE, reset: bool = False) -> SyncState:
        """A remote round-trip has started.

        With reset, the previous outcome (last sync time) is forgotten, as
        when a new remote target is configured.
        """
        if reset:
            return self._move(SyncState(enabled=True, status=SyncStatus.SYNCING, message=message))
        return self._move(
            replace(self._state, enabled=True, status=SyncStatus.SYNCING, message=message)
        )

    def succeed(self, message: str = READY_MESSAGE, at: datetime | None = None) -> SyncState:
        """The round-trip finished successfully."""
        return self._move(
            SyncState(
                enabled=True,
                status=SyncStatus.IDLE,
                message=message,
                last_synced_at=at or now_utc(),
            )
        )

    def fail(self, message: str) -> SyncState:
        """The round-trip failed; the message is shown to the user."""
        return self._move(
            replace(self._state, enabled=True, status=SyncStatus.ERROR, message=message)
        )

    # --- Private Methods ---

    def _move(self, new_state: SyncState) -> SyncState:
        current = self._state.phase
        target = new_state.phase
        if target not in TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot move sync state from {current} to {target}")

        logger.debug("Sync state: %s -> %s (%s)", current, target, new_state.message)
        self._state = new_state
        self._notifier.publish(new_state)
        return new_state
