from __future__ import annotations

import pytest

from pyhc3.config import Hc3Config, env_config_provider, resolve_config
from pyhc3.exceptions import Hc3ConfigError


@pytest.fixture
def hc3_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in ("HC3_HOST", "HC3_USER", "HC3_PASSWORD", "HC3_PROTOCOL", "HC3_POLL_BACKOFF", "HC3_REQUEST_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HC3_HOST", "192.168.1.57")
    monkeypatch.setenv("HC3_USER", "admin")
    monkeypatch.setenv("HC3_PASSWORD", "secret")
    return monkeypatch


def test_from_env_defaults(hc3_env: pytest.MonkeyPatch) -> None:
    config = Hc3Config.from_env()

    assert config.base_url == "http://192.168.1.57"
    assert config.poll_server_timeout == 30
    assert config.poll_client_timeout == 35.0
    assert config.poll_backoff == 5.0
    assert config.request_timeout is None


def test_from_env_optional_values_and_overrides(hc3_env: pytest.MonkeyPatch) -> None:
    hc3_env.setenv("HC3_PROTOCOL", "https")
    hc3_env.setenv("HC3_POLL_BACKOFF", "2.5")
    hc3_env.setenv("HC3_REQUEST_TIMEOUT", "10")

    config = Hc3Config.from_env(user="other")

    assert config.base_url == "https://192.168.1.57"
    assert config.poll_backoff == 2.5
    assert config.request_timeout == 10.0
    assert config.user == "other"


@pytest.mark.parametrize("missing", ["HC3_HOST", "HC3_USER", "HC3_PASSWORD"])
def test_from_env_requires_credentials(hc3_env: pytest.MonkeyPatch, missing: str) -> None:
    hc3_env.delenv(missing)
    with pytest.raises(Hc3ConfigError):
        Hc3Config.from_env()


def test_from_env_rejects_non_numeric_backoff(hc3_env: pytest.MonkeyPatch) -> None:
    hc3_env.setenv("HC3_POLL_BACKOFF", "soon")
    with pytest.raises(Hc3ConfigError):
        Hc3Config.from_env()


def test_client_timeout_must_exceed_server_wait() -> None:
    with pytest.raises(Hc3ConfigError):
        Hc3Config(host="h", user="u", password="p", poll_server_timeout=30, poll_client_timeout=30.0)


def test_base_url_strips_trailing_slash() -> None:
    assert Hc3Config(host="hc3.local/", user="u", password="p").base_url == "http://hc3.local"


def test_env_provider_rereads_environment(hc3_env: pytest.MonkeyPatch) -> None:
    provider = env_config_provider()
    assert resolve_config(provider).password == "secret"

    hc3_env.setenv("HC3_PASSWORD", "rotated")

    assert resolve_config(provider).password == "rotated"


def test_resolve_config_passes_through_instance() -> None:
    config = Hc3Config(host="h", user="u", password="p")
    assert resolve_config(config) is config
