"""Helpers for safe debug logging.

Request bodies can carry credentials and whole QuickApp source files.
:func:`redact_for_log` returns a copy that is safe to emit at DEBUG level.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"password", "authorization", "cookie", "token"})

# Keys whose values are bulky rather than secret; only their size is logged.
_BULKY_KEYS: frozenset[str] = frozenset({"content"})


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 10:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<{len(value)} chars>"
        return value

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            lowered = key.lower()
            if lowered in _SENSITIVE_KEYS:
                redacted[key] = "<redacted>"
            elif lowered in _BULKY_KEYS and isinstance(v, str):
                redacted[key] = f"<{len(v)} chars>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
