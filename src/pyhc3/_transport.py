"""Authenticated HTTP transport for the hub REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pyhc3._redact import redact_for_log
from pyhc3.config import ConfigProvider, Hc3Config, resolve_config
from pyhc3.exceptions import Hc3TransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of a successful (2xx) response."""

    status: int
    text: str
    endpoint: str = ""

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises
        ------
        Hc3TransportError
            If the body is not valid JSON.
        """
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise Hc3TransportError(
                f"Invalid JSON from {self.endpoint}: {self.text[:200]}",
                status_code=self.status,
                endpoint=self.endpoint,
            ) from exc


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Implementations raise :class:`Hc3TransportError` for anything that is
    not a 2xx response, which lets tests pass simple in-memory fakes.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse: ...


class HttpTransport:
    """aiohttp transport using HTTP Basic auth resolved per request."""

    def __init__(
        self,
        config: Hc3Config | ConfigProvider,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Send one request and return the body of a 2xx response."""
        # Resolved on every call so rotated credentials apply immediately.
        config = resolve_config(self._config)
        url = f"{config.base_url}{endpoint}"
        authorization = aiohttp.BasicAuth(config.user, config.password).encode()

        kwargs: dict[str, Any] = {
            "headers": {"accept": "application/json", "authorization": authorization},
        }
        if params:
            kwargs["params"] = {key: str(value) for key, value in params.items()}
        if json_body is not None:
            kwargs["json"] = json_body
        effective_timeout = timeout if timeout is not None else config.request_timeout
        if effective_timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=effective_timeout)

        if json_body is not None:
            _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(json_body))
        else:
            _logger.debug("%s %s params=%s", method, url, params)

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                status = resp.status
                try:
                    text = await resp.text()
                except UnicodeDecodeError as exc:
                    raise Hc3TransportError(
                        f"Undecodable body from {endpoint}: {exc}",
                        status_code=status,
                        endpoint=endpoint,
                    ) from exc
        except TimeoutError as exc:
            raise Hc3TransportError(
                f"Request to {endpoint} timed out after {effective_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise Hc3TransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if not 200 <= status < 300:
            raise Hc3TransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            )
        return HttpResponse(status=status, text=text, endpoint=endpoint)
