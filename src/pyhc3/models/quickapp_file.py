"""QuickApp source file model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyhc3.models._base import Hc3BaseModel


class QuickAppFile(Hc3BaseModel):
    """A source file belonging to a QuickApp.

    The listing endpoint omits :attr:`content`; it is only filled in
    when a single file is read.
    """

    name: str
    type: str = "lua"
    is_main: bool = Field(default=False, validation_alias=AliasChoices("isMain", "is_main"))
    """The main file cannot be deleted on the hub."""
    is_open: bool = Field(default=False, validation_alias=AliasChoices("isOpen", "is_open"))
    content: str | None = None

    @field_validator("is_main", "is_open", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return value is True
