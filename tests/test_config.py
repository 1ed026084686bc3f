# tests/test_config.py
from __future__ import annotations

import pytest

from datasource import config


def test_defaults_are_sane():
    assert config.FETCH_ACCEPT
    assert config.FETCH_CONNECT_TIMEOUT_S > 0
    assert not config.SWAPI_BASE_URL.endswith("/")


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("FETCH_USER_AGENT", "TestAgent/2.0")
    monkeypatch.setenv("FETCH_READ_TIMEOUT_S", "2.5")
    monkeypatch.setenv("SWAPI_BASE_URL", "https://swapi.test/api/")
    monkeypatch.setenv("DATASOURCE_LOG_LEVEL", "debug")

    settings = config.load_settings()

    assert settings.fetch.user_agent == "TestAgent/2.0"
    assert settings.fetch.read_timeout_s == 2.5
    assert settings.swapi_base_url == "https://swapi.test/api"
    assert settings.log_level == "DEBUG"


def test_malformed_integer_env_is_rejected(monkeypatch):
    monkeypatch.setenv("FETCH_MAX_REDIRECTS", "many")
    with pytest.raises(ValueError, match="FETCH_MAX_REDIRECTS"):
        config.load_settings()
