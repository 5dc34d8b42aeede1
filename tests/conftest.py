from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

import pytest

from pyhc3._transport import HttpResponse
from pyhc3.config import Hc3Config
from pyhc3.exceptions import Hc3TransportError


@dataclass
class FakeHub:
    """In-memory hub implementing the ``Transport`` protocol.

    ``poll_script`` entries drive successive refreshStates calls:
    a dict is returned as JSON, an int is raised as that HTTP status,
    a str is returned as raw body text, and an exception is raised.
    """

    devices: dict[int, dict[str, Any]] = field(default_factory=dict)
    listings: dict[str, Any] = field(default_factory=dict)
    failing_listings: set[str] = field(default_factory=set)
    failing_devices: set[int] = field(default_factory=set)
    poll_script: list[Any] = field(default_factory=list)
    on_poll_exhausted: Callable[[], None] | None = None
    on_poll: Callable[[int], None] | None = None
    files: dict[int, dict[str, dict[str, Any]]] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, Any]]] = field(default_factory=list)
    bodies: list[Any] = field(default_factory=list)

    def _ok(self, endpoint: str, body: Any) -> HttpResponse:
        text = body if isinstance(body, str) else json.dumps(body)
        return HttpResponse(status=200, text=text, endpoint=endpoint)

    def _fail(self, endpoint: str, status: int) -> Hc3TransportError:
        return Hc3TransportError(f"HTTP {status} from {endpoint}", status_code=status, endpoint=endpoint)

    @property
    def poll_cursors(self) -> list[int]:
        return [int(params["last"]) for _, endpoint, params in self.calls if endpoint == "/api/refreshStates"]

    def device_fetches(self) -> list[int]:
        prefix = "/api/devices/"
        return [int(endpoint[len(prefix) :]) for _, endpoint, _ in self.calls if endpoint.startswith(prefix)]

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        await asyncio.sleep(0)
        self.calls.append((method, endpoint, dict(params or {})))
        self.bodies.append(json_body)

        if endpoint == "/api/refreshStates":
            return self._poll(endpoint, dict(params or {}))

        if endpoint == "/api/devices":
            interface = str((params or {}).get("interface"))
            if interface in self.failing_listings:
                raise self._fail(endpoint, 500)
            return self._ok(endpoint, self.listings.get(interface, []))

        if endpoint.startswith("/api/devices/"):
            device_id = int(endpoint.rsplit("/", 1)[1])
            if device_id in self.failing_devices or device_id not in self.devices:
                raise self._fail(endpoint, 404)
            return self._ok(endpoint, self.devices[device_id])

        if endpoint.startswith("/api/quickApp/"):
            return self._files(method, endpoint, json_body)

        raise self._fail(endpoint, 404)

    def _poll(self, endpoint: str, params: dict[str, Any]) -> HttpResponse:
        if self.on_poll is not None:
            self.on_poll(int(params["last"]))
        if not self.poll_script:
            if self.on_poll_exhausted is not None:
                self.on_poll_exhausted()
            return self._ok(endpoint, {})
        step = self.poll_script.pop(0)
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, int):
            raise self._fail(endpoint, step)
        return self._ok(endpoint, step)

    def _files(self, method: str, endpoint: str, json_body: Any) -> HttpResponse:
        parts = endpoint.split("/")
        # ["", "api", "quickApp", "<id>", "files", "<name>"?]
        device_id = int(parts[3])
        files = self.files.setdefault(device_id, {})
        if len(parts) == 5:
            return self._ok(endpoint, [{k: v for k, v in f.items() if k != "content"} for f in files.values()])

        name = unquote(parts[5])
        if method == "GET":
            if name not in files:
                raise self._fail(endpoint, 404)
            return self._ok(endpoint, files[name])
        if method == "POST":
            if name in files:
                raise self._fail(endpoint, 409)
            files[name] = dict(json_body)
            return HttpResponse(status=201, text="", endpoint=endpoint)
        if method == "PUT":
            if name not in files:
                raise self._fail(endpoint, 404)
            record = {**files.pop(name), **json_body}
            files[record["name"]] = record
            return self._ok(endpoint, record)
        if method == "DELETE":
            if files.pop(name, None) is None:
                raise self._fail(endpoint, 404)
            return HttpResponse(status=200, text="", endpoint=endpoint)
        raise self._fail(endpoint, 405)


class RecordingSleep:
    """Sleep stand-in that records delays and yields once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def config() -> Hc3Config:
    return Hc3Config(host="hc3.local", user="admin", password="secret")
