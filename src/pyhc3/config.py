"""Client configuration for pyhc3."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any

from pyhc3._constants import POLL_BACKOFF_SECONDS, POLL_CLIENT_TIMEOUT, POLL_SERVER_TIMEOUT
from pyhc3.exceptions import Hc3ConfigError


def _env_float(value: str | None, name: str) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise Hc3ConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class Hc3Config:
    """Connection parameters for one hub.

    Parameters
    ----------
    host : str
        Hub host name or address, optionally with ``:port``.
    user : str
        Account used for HTTP Basic authentication.
    password : str
        Password for *user*.
    protocol : str
        URL scheme, ``"http"`` or ``"https"``.
    poll_server_timeout : int
        Seconds the hub is asked to hold a ``refreshStates`` request open.
    poll_client_timeout : float
        Client-side timeout for a single long-poll request.  Must be
        greater than *poll_server_timeout* so an idle hub is not
        mistaken for a hung connection.
    poll_backoff : float
        Seconds to wait after a failed poll before trying again.
    request_timeout : float or None
        Total timeout for every other request.  ``None`` keeps the HTTP
        session default.
    """

    host: str
    user: str
    password: str
    protocol: str = "http"
    poll_server_timeout: int = POLL_SERVER_TIMEOUT
    poll_client_timeout: float = POLL_CLIENT_TIMEOUT
    poll_backoff: float = POLL_BACKOFF_SECONDS
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.poll_client_timeout <= self.poll_server_timeout:
            raise Hc3ConfigError(
                f"poll_client_timeout ({self.poll_client_timeout}) must exceed "
                f"poll_server_timeout ({self.poll_server_timeout})"
            )
        if self.poll_backoff < 0:
            raise Hc3ConfigError("poll_backoff must not be negative")

    @property
    def base_url(self) -> str:
        """``{protocol}://{host}`` without a trailing slash."""
        return f"{self.protocol}://{self.host.rstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> Hc3Config:
        """Create configuration from environment variables.

        Reads ``HC3_HOST``, ``HC3_USER``, ``HC3_PASSWORD`` and the optional
        ``HC3_PROTOCOL``, ``HC3_POLL_BACKOFF`` and ``HC3_REQUEST_TIMEOUT``.
        Explicit keyword arguments override environment values.

        Raises
        ------
        Hc3ConfigError
            If host, user or password ends up empty.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HC3_HOST": "host",
            "HC3_USER": "user",
            "HC3_PASSWORD": "password",
            "HC3_PROTOCOL": "protocol",
        }
        config_kwargs: dict[str, Any] = {"host": "", "user": "", "password": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val.strip()

        backoff = _env_float(env.get("HC3_POLL_BACKOFF"), "HC3_POLL_BACKOFF")
        if backoff is not None:
            config_kwargs["poll_backoff"] = backoff

        request_timeout = _env_float(env.get("HC3_REQUEST_TIMEOUT"), "HC3_REQUEST_TIMEOUT")
        if request_timeout is not None:
            config_kwargs["request_timeout"] = request_timeout

        config_kwargs.update(overrides)

        missing = [name for name in ("host", "user", "password") if not config_kwargs.get(name)]
        if missing:
            raise Hc3ConfigError(
                "HC3 credentials not configured (missing: " + ", ".join(missing) + "). "
                "Set HC3_HOST, HC3_USER and HC3_PASSWORD."
            )

        return cls(**config_kwargs)


ConfigProvider = Callable[[], Hc3Config]
"""Zero-argument callable returning the configuration to use for one request."""


def resolve_config(source: Hc3Config | ConfigProvider) -> Hc3Config:
    """Return a concrete config from either a fixed config or a provider."""
    if isinstance(source, Hc3Config):
        return source
    return source()


def env_config_provider(**overrides: Any) -> ConfigProvider:
    """Provider that re-reads the environment on every call.

    Credential rotation therefore takes effect on the next request.
    """

    def _provide() -> Hc3Config:
        return Hc3Config.from_env(**overrides)

    return _provide
