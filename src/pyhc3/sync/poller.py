"""Long-poll loop over the hub event stream.

The poller owns the event cursor and a single background task.  Each
iteration issues one ``refreshStates`` request; a successful response
advances the cursor and is handed to the event handler before the next
request is made, so batches are never pipelined.  Failures sleep for a
fixed backoff and retry forever.

Stopping is cooperative: :meth:`EventPoller.stop` prevents the next
iteration, and a response that arrives after the stop is discarded.  A
loop restarted while the old one is still applying a batch waits for
that batch before applying its own.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pyhc3._constants import POLL_BACKOFF_SECONDS
from pyhc3.exceptions import Hc3Error
from pyhc3.models.events import RefreshStates

_logger = logging.getLogger(__name__)

EventFetcher = Callable[[int], Awaitable[RefreshStates]]
EventHandler = Callable[[list[Any]], Awaitable[Any]]
OutcomeCallback = Callable[[bool], None]
Sleep = Callable[[float], Awaitable[Any]]


class PollerState(StrEnum):
    IDLE = "idle"
    POLLING = "polling"
    BACKOFF = "backoff"
    STOPPED = "stopped"


class EventPoller:
    """Drives the long-poll loop for one client.

    Parameters
    ----------
    fetch_events
        Coroutine function taking the current cursor and returning the
        parsed response.  Any :class:`Hc3Error` counts as a failed poll.
    handle_events
        Coroutine function receiving each non-empty event batch.
    backoff
        Seconds to sleep after a failed poll.
    cursor
        Initial cursor; ``0`` asks the hub for events from now on.
    on_outcome
        Called with ``True``/``False`` after each poll that was not
        discarded.
    sleep
        Sleep implementation, injectable for tests.
    """

    def __init__(
        self,
        fetch_events: EventFetcher,
        handle_events: EventHandler,
        *,
        backoff: float = POLL_BACKOFF_SECONDS,
        cursor: int = 0,
        on_outcome: OutcomeCallback | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._fetch_events = fetch_events
        self._handle_events = handle_events
        self._backoff = backoff
        self._cursor = cursor
        self._on_outcome = on_outcome
        self._sleep = sleep
        self._state = PollerState.IDLE
        # Bumped on every start(); a loop whose generation is stale exits.
        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        # Shared by every generation so a restarted loop waits for the
        # previous batch to finish applying.
        self._apply_lock = asyncio.Lock()

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def cursor(self) -> int:
        """Last event sequence number received from the hub."""
        return self._cursor

    @property
    def is_running(self) -> bool:
        return self._state in (PollerState.POLLING, PollerState.BACKOFF)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the loop; a no-op while it is already running.

        Must be called from within a running event loop.
        """
        if self.is_running:
            return
        self._generation += 1
        self._state = PollerState.POLLING
        task = asyncio.create_task(self._run(self._generation), name="pyhc3-event-poller")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task
        _logger.info("Started event polling at cursor %s", self._cursor)

    def stop(self) -> None:
        """Stop after the in-flight request, if any, completes."""
        if self._state is PollerState.STOPPED:
            return
        self._state = PollerState.STOPPED
        _logger.info("Stopped event polling")

    async def join(self) -> None:
        """Wait for the current loop task to finish."""
        task = self._task
        if task is not None:
            await task

    async def aclose(self) -> None:
        """Stop and cancel every loop task, including stale ones."""
        self.stop()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None

    def reset_cursor(self) -> None:
        """Forget the cursor; only used before an explicit full refetch."""
        self._cursor = 0

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll_once(self) -> bool:
        """Run a single iteration without backoff; returns success."""
        response = await self._request()
        self._report(response is not None)
        if response is None:
            return False
        await self._apply(response)
        return True

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._state is not PollerState.STOPPED

    async def _run(self, generation: int) -> None:
        while self._is_current(generation):
            response = await self._request()
            if not self._is_current(generation):
                _logger.debug("Discarding poll result received after stop")
                break

            if response is None:
                self._report(False)
                self._state = PollerState.BACKOFF
                await self._sleep(self._backoff)
                if self._is_current(generation):
                    self._state = PollerState.POLLING
                continue

            self._report(True)
            await self._apply(response)

    async def _request(self) -> RefreshStates | None:
        try:
            return await self._fetch_events(self._cursor)
        except Hc3Error as exc:
            _logger.warning("Event polling failed: %s", exc)
        except Exception:
            _logger.exception("Unexpected error while polling events")
        return None

    async def _apply(self, response: RefreshStates) -> None:
        async with self._apply_lock:
            self._advance_cursor(response.last)
            if not response.events:
                return
            try:
                await self._handle_events(response.events)
            except Exception:
                _logger.exception("Event handler failed; continuing at cursor %s", self._cursor)

    def _advance_cursor(self, last: int | None) -> None:
        if last is None:
            return
        if last <= self._cursor:
            if last < self._cursor:
                _logger.debug("Ignoring stale cursor %s (current %s)", last, self._cursor)
            return
        self._cursor = last

    def _report(self, success: bool) -> None:
        if self._on_outcome is not None:
            self._on_outcome(success)
