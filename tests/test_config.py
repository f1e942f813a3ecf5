"""Tests for client configuration."""

import dataclasses

import pytest

from dialog360.config import ClientConfig, Settings
from dialog360.errors import ConfigurationError


def test_defaults(config):
    assert config.as_dict() == {
        "api_key": "test-api-key",
        "phone_number_id": "test-phone-number-id",
        "base_url": "https://waba-v2.360dialog.io",
        "timeout": 30,
        "max_retries": 3,
        "api_generation": "cloud",
        "backoff_base": 2.0,
        "backoff_cap": None,
        "backoff_jitter": 0.0,
    }
    assert config.messages_path == "/messages"


def test_is_immutable(config):
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.max_retries = 10


def test_repr_hides_api_key(config):
    assert "test-api-key" not in repr(config)


@pytest.mark.parametrize("overrides", [
    {"api_key": ""},
    {"timeout": 0},
    {"max_retries": 0},
    {"api_generation": "v3"},
    {"backoff_base": 0},
    {"backoff_cap": -1},
    {"backoff_jitter": -0.1},
])
def test_invalid_values(overrides):
    kwargs = {"api_key": "k", "phone_number_id": "p", **overrides}

    with pytest.raises(ConfigurationError):
        ClientConfig(**kwargs)


def test_from_settings(monkeypatch):
    monkeypatch.setenv("DIALOG360_API_KEY", "env-key")
    monkeypatch.setenv("DIALOG360_PHONE_NUMBER_ID", "env-phone")
    monkeypatch.setenv("DIALOG360_BASE_URL", "https://waba.360dialog.io/")
    monkeypatch.setenv("DIALOG360_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("DIALOG360_API_GENERATION", "legacy")

    config = ClientConfig.from_settings(Settings(_env_file=None))

    assert config.api_key == "env-key"
    assert config.phone_number_id == "env-phone"
    assert config.base_url == "https://waba.360dialog.io"
    assert config.max_retries == 5
    assert config.messages_path == "/v1/messages"


@pytest.mark.parametrize("generation, expected", [
    ("cloud", "https://waba-v2.360dialog.io"),
    ("legacy", "https://waba.360dialog.io"),
])
def test_default_host_follows_api_generation(generation, expected):
    assert ClientConfig(api_key="k", phone_number_id="p", api_generation=generation).base_url == expected


def test_explicit_base_url_wins_over_generation():
    config = ClientConfig(api_key="k", phone_number_id="p", base_url="https://sandbox.example/", api_generation="legacy")

    assert config.base_url == "https://sandbox.example"


def test_from_settings_legacy_without_base_url(monkeypatch):
    monkeypatch.setenv("DIALOG360_API_KEY", "env-key")
    monkeypatch.setenv("DIALOG360_API_GENERATION", "legacy")
    monkeypatch.delenv("DIALOG360_BASE_URL", raising=False)

    config = ClientConfig.from_settings(Settings(_env_file=None))

    assert config.base_url == "https://waba.360dialog.io"
