"""Tests for environment configuration."""

import pytest

from defi_guardian.config import (
    DEFAULT_SERVICE_URLS,
    DEFAULT_TIMEOUT,
    ConfigError,
    GuardianConfig,
    UpstreamService,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("INTERNAL_API_KEY", "GUARDIAN_UPSTREAM_TIMEOUT", "GUARDIAN_UPSTREAM_MAX_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)
    for service in UpstreamService:
        monkeypatch.delenv(f"GUARDIAN_{service.name}_URL", raising=False)


def test_missing_api_key_fails_fast():
    with pytest.raises(ConfigError, match="INTERNAL_API_KEY"):
        GuardianConfig.from_env()


def test_blank_api_key_fails_fast(monkeypatch):
    monkeypatch.setenv("INTERNAL_API_KEY", "   ")

    with pytest.raises(ConfigError):
        GuardianConfig.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("INTERNAL_API_KEY", "secret")

    config = GuardianConfig.from_env()

    assert config.api_key == "secret"
    assert config.service_urls == DEFAULT_SERVICE_URLS
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.max_attempts == 1


def test_overrides(monkeypatch):
    monkeypatch.setenv("INTERNAL_API_KEY", "secret")
    monkeypatch.setenv("GUARDIAN_LENDING_URL", "http://localhost:9000/lending")
    monkeypatch.setenv("GUARDIAN_UPSTREAM_TIMEOUT", "2.5")
    monkeypatch.setenv("GUARDIAN_UPSTREAM_MAX_ATTEMPTS", "3")

    config = GuardianConfig.from_env()

    assert config.service_urls[UpstreamService.LENDING] == "http://localhost:9000/lending"
    assert config.service_urls[UpstreamService.YIELD] == DEFAULT_SERVICE_URLS[UpstreamService.YIELD]
    assert config.timeout == 2.5
    assert config.max_attempts == 3


@pytest.mark.parametrize(
    "name,value",
    [
        ("GUARDIAN_UPSTREAM_TIMEOUT", "soon"),
        ("GUARDIAN_UPSTREAM_TIMEOUT", "0"),
        ("GUARDIAN_UPSTREAM_MAX_ATTEMPTS", "0"),
        ("GUARDIAN_UPSTREAM_MAX_ATTEMPTS", "two"),
    ],
)
def test_invalid_numeric_settings(monkeypatch, name, value):
    monkeypatch.setenv("INTERNAL_API_KEY", "secret")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        GuardianConfig.from_env()
