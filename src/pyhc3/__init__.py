"""pyhc3 - Async Python client for the Home Center 3 QuickApp API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhc3")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhc3.client import Hc3Client
from pyhc3.config import ConfigProvider, Hc3Config, env_config_provider
from pyhc3.exceptions import (
    Hc3ConfigError,
    Hc3Error,
    Hc3FileNameError,
    Hc3TransportError,
    InvalidRecordError,
)
from pyhc3.models import Device, QuickAppFile, RefreshStates
from pyhc3.state.connection import ConnectionState
from pyhc3.state.sorting import SORT_COLUMNS, sort_devices
from pyhc3.state.store import SnapshotStore
from pyhc3.sync.poller import EventPoller, PollerState
from pyhc3.sync.reconciler import Reconciler

__all__ = [
    "__version__",
    "ConfigProvider",
    "ConnectionState",
    "Device",
    "EventPoller",
    "Hc3Client",
    "Hc3Config",
    "Hc3ConfigError",
    "Hc3Error",
    "Hc3FileNameError",
    "Hc3TransportError",
    "InvalidRecordError",
    "PollerState",
    "QuickAppFile",
    "Reconciler",
    "RefreshStates",
    "SORT_COLUMNS",
    "SnapshotStore",
    "env_config_provider",
    "sort_devices",
]
