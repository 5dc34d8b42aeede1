"""Base model and coercion helpers for hub API payloads.

Every hub response model inherits from :class:`Hc3BaseModel` which
provides:

* frozen instances, so records can be shared between the store and
  its listeners without copying.
* ``populate_by_name`` so both the camelCase wire keys and the
  snake_case field names are accepted.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def safe_int(value: Any) -> int | None:
    """Convert *value* to ``int``; ``None`` for anything non-numeric.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result) or result != int(result):
        return None
    return int(result)


def epoch_to_datetime(value: int | None) -> datetime | None:
    """Convert a Unix timestamp in seconds to an aware UTC datetime."""
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=UTC)


class Hc3BaseModel(BaseModel):
    """Base for hub API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        # Keep an explicitly passed raw (e.g. model_copy round trips).
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged
