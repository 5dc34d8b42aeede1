"""Connection state derived from request outcomes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

_logger = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


ConnectionListener = Callable[[ConnectionState], None]


class ConnectionMonitor:
    """Tracks whether the hub is currently reachable.

    The state is never set directly; it follows the outcome of the
    initial load and of each poll iteration via :meth:`record_outcome`.
    """

    def __init__(self) -> None:
        self._state = ConnectionState.DISCONNECTED
        self._listeners: list[ConnectionListener] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def record_outcome(self, success: bool) -> None:
        new_state = ConnectionState.CONNECTED if success else ConnectionState.DISCONNECTED
        if new_state is self._state:
            return
        _logger.info("Hub connection %s", new_state)
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                _logger.warning("Connection listener %r failed", listener, exc_info=True)

    def add_listener(self, listener: ConnectionListener) -> Callable[[], None]:
        """Register a transition listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
