"""Device record model."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, ValidationError, field_validator

from pyhc3._constants import QUICK_APP_INTERFACE
from pyhc3.exceptions import InvalidRecordError
from pyhc3.models._base import Hc3BaseModel, epoch_to_datetime, safe_int


class Device(Hc3BaseModel):
    """One device as currently known locally.

    Fields are mapped from ``/api/devices`` and ``/api/devices/{id}``.
    Only the fields the client works with are modelled; everything else
    stays available through :attr:`raw`.
    """

    id: int
    """Stable device identifier."""
    name: str | None = None
    """Display name."""
    type: str | None = None
    """Device type (e.g. ``"com.fibaro.binarySwitch"``)."""
    modified: int | None = None
    """Unix timestamp (seconds) of the last remote modification."""
    interfaces: tuple[str, ...] = ()
    """Capability tags; ``"quickApp"`` marks a manageable app."""
    is_child: bool | None = Field(default=None, validation_alias=AliasChoices("isChild", "is_child"))
    """``True`` for QuickApp children, which are read-only in the UI."""

    @property
    def is_quick_app(self) -> bool:
        """Whether the device carries the managed ``quickApp`` interface."""
        return self.has_interface(QUICK_APP_INTERFACE)

    @property
    def modified_at(self) -> datetime | None:
        """:attr:`modified` as an aware UTC datetime."""
        return epoch_to_datetime(self.modified)

    def has_interface(self, interface: str) -> bool:
        return interface in self.interfaces

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> int:
        parsed = safe_int(value)
        if parsed is None:
            raise ValueError(f"device id must be an integer, got {value!r}")
        return parsed

    @field_validator("modified", mode="before")
    @classmethod
    def _coerce_modified(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("name", "type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("interfaces", mode="before")
    @classmethod
    def _coerce_interfaces(cls, value: Any) -> tuple[str, ...]:
        if not isinstance(value, (list, tuple, set, frozenset)):
            return ()
        return tuple(str(item) for item in value if isinstance(item, str))

    @field_validator("is_child", mode="before")
    @classmethod
    def _coerce_is_child(cls, value: Any) -> bool | None:
        if value is None:
            return None
        return bool(value)

    @classmethod
    def from_payload(cls, payload: Device | Mapping[str, Any]) -> Device:
        """Validate a wire payload (or pass through an existing record).

        Raises
        ------
        InvalidRecordError
            If *payload* is not a mapping or has no usable ``id``.
        """
        if isinstance(payload, Device):
            return payload
        if not isinstance(payload, Mapping):
            raise InvalidRecordError(
                f"device payload must be an object, got {type(payload).__name__}",
                payload=payload,
            )
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            raise InvalidRecordError(f"invalid device payload: {exc.errors()[0]['msg']}", payload=payload) from exc
