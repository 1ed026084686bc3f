# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


API = "https://api.test"


@pytest.fixture
def api_url():
    """Build absolute URLs on the fake API host used by respx routes."""

    def _url(path: str) -> str:
        return f"{API}{path}"

    return _url


@pytest.fixture
def changes():
    """
    Recorder for DataSource.on_change.

    Use as ``ds.on_change = changes`` and inspect ``changes.events``.
    """

    class _Recorder:
        def __init__(self) -> None:
            self.events = []

        def __call__(self, event) -> None:
            self.events.append(event)

    return _Recorder()
