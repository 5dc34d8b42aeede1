"""Apply hub change events to the local snapshot.

Events are handled strictly in delivery order, one at a time.  A removal
is applied locally; every other relevant kind re-fetches the device and
lets the interface gate decide between upsert and removal.  One bad
event never stops the rest of its batch.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from pyhc3._constants import DEVICE_REMOVED_EVENT, QUICK_APP_INTERFACE, RELEVANT_EVENT_TYPES
from pyhc3.exceptions import Hc3Error
from pyhc3.models._base import safe_int
from pyhc3.models.device import Device
from pyhc3.state.store import SnapshotStore

_logger = logging.getLogger(__name__)

DeviceFetcher = Callable[[int], Awaitable[Device]]


def resolve_device_id(event: Mapping[str, Any]) -> int | None:
    """Device id of an event: ``data.id`` when usable, else top-level ``id``."""
    data = event.get("data")
    if isinstance(data, Mapping):
        device_id = safe_int(data.get("id"))
        if device_id is not None:
            return device_id
    return safe_int(event.get("id"))


def is_relevant(event: Any) -> bool:
    if not isinstance(event, Mapping):
        return False
    event_type = event.get("type")
    return isinstance(event_type, str) and event_type in RELEVANT_EVENT_TYPES


class Reconciler:
    """Turns hub events into :class:`SnapshotStore` mutations."""

    def __init__(
        self,
        store: SnapshotStore,
        fetch_device: DeviceFetcher,
        *,
        interface: str = QUICK_APP_INTERFACE,
    ) -> None:
        self._store = store
        self._fetch_device = fetch_device
        self._interface = interface

    async def reconcile(self, events: Iterable[Any]) -> int:
        """Apply a batch; returns how many events changed the snapshot."""
        relevant = [event for event in events if is_relevant(event)]
        if not relevant:
            return 0

        _logger.debug("Processing %d device event(s)", len(relevant))
        applied = 0
        for event in relevant:
            if await self.apply_event(event):
                applied += 1
        return applied

    async def apply_event(self, event: Mapping[str, Any]) -> bool:
        device_id = resolve_device_id(event)
        if device_id is None:
            _logger.debug("Dropping %s without a device id: %r", event.get("type"), event)
            return False

        if event.get("type") == DEVICE_REMOVED_EVENT:
            _logger.debug("Device removed: %s", device_id)
            return self._store.remove(device_id)

        # Created, modified, room and file changes are all handled by
        # re-reading the device.
        return await self.refresh_device(device_id)

    async def refresh_device(self, device_id: int) -> bool:
        """Re-fetch one device and upsert or remove it by interface."""
        try:
            device = await self._fetch_device(device_id)
        except Hc3Error as exc:
            # Not retried here; a later event or poll cycle reconciles it.
            _logger.warning("Failed to fetch device %s: %s", device_id, exc)
            return False
        except Exception:
            _logger.exception("Unexpected error while fetching device %s", device_id)
            return False

        if device.has_interface(self._interface):
            existed = device.id in self._store
            self._store.upsert(device)
            _logger.debug("%s QuickApp %s", "Updated" if existed else "Added", device.id)
            return True

        if self._store.remove(device_id):
            _logger.debug("Removed device %s without %s interface", device_id, self._interface)
            return True
        return False
