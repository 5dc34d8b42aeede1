"""Deterministic display ordering for device lists."""

from __future__ import annotations

import locale
import re
from collections.abc import Iterable
from typing import Any

from pyhc3.models.device import Device

SORT_COLUMNS: tuple[str, ...] = ("id", "name", "type", "modified")

_CHUNK_RE = re.compile(r"(\d+)")


def natural_key(value: Any) -> tuple[tuple[int, int, str], ...]:
    """Case-insensitive, digit-aware sort key.

    ``None`` sorts as the empty string.  Digit runs compare by numeric
    value, so ``"app2"`` orders before ``"app10"``; text runs compare
    through the active locale's collation.
    """
    text = "" if value is None else str(value).casefold()
    key: list[tuple[int, int, str]] = []
    for chunk in _CHUNK_RE.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), chunk))
        else:
            key.append((1, 0, locale.strxfrm(chunk)))
    return tuple(key)


def sort_devices(
    devices: Iterable[Device],
    column: str = "id",
    *,
    descending: bool = False,
) -> list[Device]:
    """Return *devices* ordered by *column*.

    Raises
    ------
    ValueError
        If *column* is not one of :data:`SORT_COLUMNS`.
    """
    if column not in SORT_COLUMNS:
        raise ValueError(f"column must be one of {SORT_COLUMNS}, got {column!r}")
    return sorted(devices, key=lambda device: natural_key(getattr(device, column)), reverse=descending)
