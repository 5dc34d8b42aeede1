"""High-level async client for the hub REST API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, cast

import aiohttp

from pyhc3._api import devices as _devices_api
from pyhc3._api import events as _events_api
from pyhc3._api import files as _files_api
from pyhc3._constants import DEVICE_UI_PATH, QUICK_APP_INTERFACE
from pyhc3._transport import HttpTransport, Transport
from pyhc3.config import ConfigProvider, Hc3Config, resolve_config
from pyhc3.exceptions import Hc3Error
from pyhc3.models.device import Device
from pyhc3.models.events import RefreshStates
from pyhc3.models.quickapp_file import QuickAppFile
from pyhc3.state.connection import ConnectionListener, ConnectionMonitor, ConnectionState
from pyhc3.state.sorting import sort_devices
from pyhc3.state.store import SnapshotListener, SnapshotStore
from pyhc3.sync.poller import EventPoller, PollerState, Sleep
from pyhc3.sync.reconciler import Reconciler

_logger = logging.getLogger(__name__)


class Hc3Client:
    """Async client for one hub session.

    Owns the device snapshot, the event poller and the connection state.

    Usage::

        async with Hc3Client(Hc3Config.from_env()) as client:
            client.add_snapshot_listener(render)
            await client.connect()
            ...
    """

    def __init__(
        self,
        config: Hc3Config | ConfigProvider,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._store = SnapshotStore()
        self._connection = ConnectionMonitor()
        self._reconciler = Reconciler(self._store, self.get_device, interface=QUICK_APP_INTERFACE)
        # Backoff is fixed at construction; credentials are resolved per request.
        self._poller = EventPoller(
            self._fetch_events,
            self._reconciler.reconcile,
            backoff=self._current_config().poll_backoff,
            on_outcome=self._connection.record_outcome,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Hc3Client:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._poller.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise Hc3Error("Client not initialized. Use 'async with Hc3Client(...) as client:'")
        return self._transport

    def _current_config(self) -> Hc3Config:
        return resolve_config(self._config)

    async def _fetch_events(self, last: int) -> RefreshStates:
        config = self._current_config()
        return await _events_api.fetch_refresh_states(
            self._require_transport(),
            last,
            server_timeout=config.poll_server_timeout,
            client_timeout=config.poll_client_timeout,
        )

    # ------------------------------------------------------------------
    # Snapshot and connection state
    # ------------------------------------------------------------------

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def poller(self) -> EventPoller:
        return self._poller

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection.state

    @property
    def poller_state(self) -> PollerState:
        return self._poller.state

    def devices(self) -> list[Device]:
        """Current snapshot, unordered."""
        return self._store.snapshot_as_list()

    def sorted_devices(self, column: str = "id", *, descending: bool = False) -> list[Device]:
        """Current snapshot ordered for display by *column*."""
        return sort_devices(self._store.snapshot_as_list(), column, descending=descending)

    def add_snapshot_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        return self._store.add_listener(listener)

    def add_connection_listener(self, listener: ConnectionListener) -> Callable[[], None]:
        return self._connection.add_listener(listener)

    # ------------------------------------------------------------------
    # Loading and synchronization
    # ------------------------------------------------------------------

    async def load_all(self) -> list[Device]:
        """Replace the snapshot with QuickApps and QuickApp children.

        Both listings are requested concurrently and both must succeed.
        On failure the connection is marked disconnected, the snapshot
        is left as it was, and the first error is raised.
        """
        transport = self._require_transport()
        primary, children = await asyncio.gather(
            _devices_api.fetch_devices_by_interface(transport, QUICK_APP_INTERFACE),
            _devices_api.fetch_child_devices(transport),
            return_exceptions=True,
        )
        for result in (primary, children):
            if isinstance(result, BaseException):
                self._connection.record_outcome(False)
                _logger.warning("Failed to fetch QuickApps: %s", result)
                raise result

        regular = cast(list[dict[str, Any]], primary)
        child_records = cast(list[dict[str, Any]], children)
        self._store.replace_all([*regular, *child_records])
        self._connection.record_outcome(True)
        _logger.info("Fetched QuickApps: %d regular, %d children", len(regular), len(child_records))
        return self._store.snapshot_as_list()

    async def connect(self) -> bool:
        """Load the snapshot and start event polling.

        Returns ``False`` (and leaves the poller untouched) when the
        initial load fails.
        """
        try:
            await self.load_all()
        except Hc3Error as exc:
            _logger.error("Connection to hub failed: %s", exc)
            return False
        self.start()
        return True

    async def refresh(self, *, full: bool = False) -> list[Device]:
        """Reload the snapshot; ``full=True`` also restarts the event cursor."""
        if full:
            self._poller.reset_cursor()
        return await self.load_all()

    def start(self) -> None:
        """Start event polling (idempotent)."""
        self._poller.start()

    def stop(self) -> None:
        """Stop event polling after the in-flight request."""
        self._poller.stop()

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def get_device(self, device_id: int) -> Device:
        """Fetch a single device from the hub."""
        return await _devices_api.fetch_device(self._require_transport(), device_id)

    def device_ui_url(self, device_id: int) -> str:
        """Browser URL of a device's web UI."""
        return f"{self._current_config().base_url}{DEVICE_UI_PATH}/{device_id}"

    # ------------------------------------------------------------------
    # QuickApp files
    # ------------------------------------------------------------------

    async def list_files(self, device_id: int) -> list[QuickAppFile]:
        return await _files_api.list_files(self._require_transport(), device_id)

    async def get_file(self, device_id: int, name: str) -> QuickAppFile:
        return await _files_api.get_file(self._require_transport(), device_id, name)

    async def save_file(self, device_id: int, name: str, content: str) -> None:
        await _files_api.save_file(self._require_transport(), device_id, name, content)

    async def create_file(self, device_id: int, name: str, *, content: str = "") -> None:
        await _files_api.create_file(self._require_transport(), device_id, name, content=content)

    async def rename_file(self, device_id: int, old_name: str, new_name: str) -> None:
        await _files_api.rename_file(self._require_transport(), device_id, old_name, new_name)

    async def delete_file(self, device_id: int, name: str) -> None:
        await _files_api.delete_file(self._require_transport(), device_id, name)
