"""In-memory device snapshot.

Mutations are whole-record: a record is inserted, replaced or deleted,
never patched field by field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pyhc3.exceptions import InvalidRecordError
from pyhc3.models.device import Device

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[], None]


class SnapshotStore:
    """Mapping of device id to :class:`Device`.

    Listeners registered with :meth:`add_listener` are called after
    every mutation that changed the snapshot.
    """

    def __init__(self) -> None:
        self._devices: dict[int, Device] = {}
        self._listeners: list[SnapshotListener] = []

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def get(self, device_id: int) -> Device | None:
        return self._devices.get(device_id)

    def snapshot_as_list(self) -> list[Device]:
        """Copy of all records; order is unspecified."""
        return list(self._devices.values())

    def replace_all(self, records: Any) -> None:
        """Swap the whole snapshot for *records*.

        Anything that is not a list/tuple yields an empty snapshot, and
        entries that are not valid device records are skipped.
        """
        devices: dict[int, Device] = {}
        if isinstance(records, (list, tuple)):
            for item in records:
                try:
                    device = Device.from_payload(item)
                except InvalidRecordError as exc:
                    _logger.debug("Skipping malformed device record: %s", exc)
                    continue
                devices[device.id] = device
        else:
            _logger.debug("replace_all received %s, clearing snapshot", type(records).__name__)
        self._devices = devices
        self._notify()

    def upsert(self, record: Device | Mapping[str, Any]) -> Device:
        """Insert or wholesale-replace a record.

        Raises
        ------
        InvalidRecordError
            If *record* has no usable ``id``.
        """
        device = Device.from_payload(record)
        self._devices[device.id] = device
        self._notify()
        return device

    def remove(self, device_id: int) -> bool:
        """Delete *device_id* if present; returns whether anything was removed."""
        if self._devices.pop(device_id, None) is None:
            return False
        self._notify()
        return True

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _logger.warning("Snapshot listener %r failed", listener, exc_info=True)
