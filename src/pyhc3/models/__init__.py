"""Data models for hub API payloads."""

from pyhc3.models._base import Hc3BaseModel, epoch_to_datetime, safe_int
from pyhc3.models.device import Device
from pyhc3.models.events import RefreshStates
from pyhc3.models.quickapp_file import QuickAppFile

__all__ = [
    "Device",
    "Hc3BaseModel",
    "QuickAppFile",
    "RefreshStates",
    "epoch_to_datetime",
    "safe_int",
]
