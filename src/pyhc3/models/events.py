"""Long-poll response model for ``/api/refreshStates``."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, field_validator

from pyhc3.models._base import Hc3BaseModel, safe_int

_logger = logging.getLogger(__name__)


class RefreshStates(Hc3BaseModel):
    """One long-poll response.

    ``last`` is the hub's new event cursor, if it sent one.  ``events``
    holds the raw event objects in delivery order; entries are left
    unvalidated so one malformed event cannot reject the whole batch.
    """

    last: int | None = None
    events: list[Any] = Field(default_factory=list)

    @field_validator("last", mode="before")
    @classmethod
    def _coerce_last(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("events", mode="before")
    @classmethod
    def _coerce_events(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            _logger.debug("Ignoring non-list events field: %r", type(value).__name__)
            return []
        return list(value)
