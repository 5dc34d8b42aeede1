"""Custom exception hierarchy for pyhc3."""

from __future__ import annotations

from typing import Any


class Hc3Error(Exception):
    """Base exception for all pyhc3 errors."""


class Hc3ConfigError(Hc3Error):
    """Invalid or missing configuration."""


class Hc3TransportError(Hc3Error):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class InvalidRecordError(Hc3Error):
    """A device payload could not be turned into a device record.

    Raised for payloads without a usable integer ``id``.  Callers
    applying remote data are expected to catch it and skip the record.
    """

    def __init__(self, message: str, *, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class Hc3FileNameError(Hc3Error, ValueError):
    """QuickApp file name rejected by local validation."""
