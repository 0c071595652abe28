"""Tests for settings loading."""
import pytest
from pydantic import ValidationError

from event_tracker.config import DEFAULT_BIND_ADDRESS, Settings


def test_default_bind_address(monkeypatch):
    monkeypatch.delenv("BIND_ADDRESS", raising=False)
    settings = Settings(_env_file=None)

    assert settings.BIND_ADDRESS == DEFAULT_BIND_ADDRESS
    assert settings.bind_host == "127.0.0.1"
    assert settings.bind_port == 8080


def test_bind_address_from_env(monkeypatch):
    monkeypatch.setenv("BIND_ADDRESS", "0.0.0.0:9000")
    settings = Settings(_env_file=None)

    assert settings.bind_host == "0.0.0.0"
    assert settings.bind_port == 9000


def test_ipv6_bind_address():
    settings = Settings(_env_file=None, BIND_ADDRESS="[::1]:8081")
    assert settings.bind_host == "::1"
    assert settings.bind_port == 8081


@pytest.mark.parametrize("value", ["localhost", ":8080", "localhost:", "localhost:http", "localhost:70000"])
def test_malformed_bind_address(value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, BIND_ADDRESS=value)


def test_rate_limit_defaults(monkeypatch):
    monkeypatch.delenv("RATE_LIMIT", raising=False)
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)
    settings = Settings(_env_file=None)

    assert settings.RATE_LIMIT == "12/minute"
    assert settings.RATE_LIMIT_ENABLED is True
