"""Device endpoints: /api/devices and /api/devices/{id}."""

from __future__ import annotations

import logging
from typing import Any

from pyhc3._constants import DEVICES_ENDPOINT, QUICK_APP_CHILD_INTERFACE
from pyhc3._transport import Transport
from pyhc3.models.device import Device

_logger = logging.getLogger(__name__)


async def fetch_devices_by_interface(transport: Transport, interface: str) -> list[dict[str, Any]]:
    """List raw device payloads exposing *interface*.

    A body that is valid JSON but not a list is treated as an empty
    listing.  Invalid JSON raises :class:`Hc3TransportError`.
    """
    response = await transport.request("GET", DEVICES_ENDPOINT, params={"interface": interface})
    decoded = response.json()
    if not isinstance(decoded, list):
        _logger.debug("Device listing for %s was not a list, treating as empty", interface)
        return []
    return [item for item in decoded if isinstance(item, dict)]


async def fetch_child_devices(transport: Transport) -> list[dict[str, Any]]:
    """List QuickApp children, each marked with ``isChild: true``."""
    items = await fetch_devices_by_interface(transport, QUICK_APP_CHILD_INTERFACE)
    return [{**item, "isChild": True} for item in items]


async def fetch_device(
    transport: Transport,
    device_id: int,
    *,
    timeout: float | None = None,
) -> Device:
    """Fetch a single device.

    Raises
    ------
    Hc3TransportError
        Network failure, non-2xx status or invalid JSON.
    InvalidRecordError
        The body is not a usable device record.
    """
    response = await transport.request("GET", f"{DEVICES_ENDPOINT}/{device_id}", timeout=timeout)
    return Device.from_payload(response.json())
