"""Replay-on-subscribe publish/subscribe."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]

logger = logging.getLogger(__name__)


class Notifier(Generic[T]):
    """Subscription list owned by a single store or state machine.

    New listeners are called once with the current value as soon as they
    subscribe, then on every publish, in subscription order. Delivery is
    synchronous: publish returns only after every listener has run.
    """

    def __init__(self, current: Callable[[], T]) -> None:
        """
        Args:
            current: Returns the value replayed to new subscribers
        """
        self._current = current
        self._listeners: dict[int, Listener[T]] = {}
        self._handles = itertools.count(1)

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener[T]) -> Unsubscribe:
        """Register a listener and replay the current value to it.

        Returns:
            Callable removing the listener. Calling it twice is harmless.
        """
        handle = next(self._handles)
        self._listeners[handle] = listener
        listener(self._current())

        def unsubscribe() -> None:
            self._listeners.pop(handle, None)

        return unsubscribe

    def publish(self, value: T) -> None:
        """Deliver a value to every listener."""
        logger.debug("Publishing to %d listener(s)", len(self._listeners))
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners.values()):
            listener(value)
