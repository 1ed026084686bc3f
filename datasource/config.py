# datasource/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be an integer; got {v!r}") from err


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


# Load .env from project root if present
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

CLIENT_NAME = "django-data-source"
DEFAULT_USER_AGENT = f"{CLIENT_NAME}/0.1 (+https://github.com/django-data-source)"

# -------------------------------
# HTTP transport (constants, env-overridable)
# -------------------------------
FETCH_USER_AGENT: str = _getenv_str("FETCH_USER_AGENT", DEFAULT_USER_AGENT)
FETCH_ACCEPT: str = _getenv_str("FETCH_ACCEPT", "application/json")
FETCH_CONNECT_TIMEOUT_S: float = _getenv_float("FETCH_CONNECT_TIMEOUT_S", 5.0)
FETCH_READ_TIMEOUT_S: float = _getenv_float("FETCH_READ_TIMEOUT_S", 15.0)
FETCH_MAX_REDIRECTS: int = _getenv_int("FETCH_MAX_REDIRECTS", 5)

# -------------------------------
# Star Wars API facade
# -------------------------------
SWAPI_BASE_URL: str = _getenv_str("SWAPI_BASE_URL", "https://swapi.dev/api").rstrip("/")

# -------------------------------
# Logging
# -------------------------------
DATASOURCE_LOG_LEVEL: str = _getenv_str("DATASOURCE_LOG_LEVEL", "WARNING").upper()


@dataclass(frozen=True)
class FetchConfig:
    user_agent: str
    accept: str
    connect_timeout_s: float
    read_timeout_s: float
    max_redirects: int


@dataclass(frozen=True)
class AppConfig:
    fetch: FetchConfig
    swapi_base_url: str
    log_level: str


def load_settings() -> AppConfig:
    """
    Re-read the environment and build a typed settings object.

    Module-level constants above are frozen at import time; this helper is for
    callers (CLI, tests) that change the environment after import.
    """
    fetch = FetchConfig(
        user_agent=_getenv_str("FETCH_USER_AGENT", DEFAULT_USER_AGENT),
        accept=_getenv_str("FETCH_ACCEPT", "application/json"),
        connect_timeout_s=_getenv_float("FETCH_CONNECT_TIMEOUT_S", 5.0),
        read_timeout_s=_getenv_float("FETCH_READ_TIMEOUT_S", 15.0),
        max_redirects=_getenv_int("FETCH_MAX_REDIRECTS", 5),
    )
    return AppConfig(
        fetch=fetch,
        swapi_base_url=_getenv_str("SWAPI_BASE_URL", "https://swapi.dev/api").rstrip("/"),
        log_level=_getenv_str("DATASOURCE_LOG_LEVEL", "WARNING").upper(),
    )


__all__ = [
    "FETCH_USER_AGENT",
    "FETCH_ACCEPT",
    "FETCH_CONNECT_TIMEOUT_S",
    "FETCH_READ_TIMEOUT_S",
    "FETCH_MAX_REDIRECTS",
    "SWAPI_BASE_URL",
    "DATASOURCE_LOG_LEVEL",
    "FetchConfig",
    "AppConfig",
    "load_settings",
]
