# datasource/swapi.py
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from . import config
from .fetch import DataSource, Page
from .fetch.minimum import MinimumOption
from .fetch.source import ChangeHandler

_ABSOLUTE_RE = re.compile(r"^https?:", re.IGNORECASE)


def expand_url(url: str, base_url: str | None = None) -> str:
    """Prefix relative paths like ``/people/1/`` with the API base URL."""
    if _ABSOLUTE_RE.match(url):
        return url
    return (base_url or config.SWAPI_BASE_URL) + url


class Swapi:
    """
    Star Wars API facade over a DataSource.

    Accepts API-relative paths as well as the absolute URLs the API embeds in
    its own payloads (``person["films"]`` etc.).
    """

    def __init__(self, source: DataSource | None = None, *, base_url: str | None = None) -> None:
        self.source = source or DataSource()
        self.base_url = (base_url or config.SWAPI_BASE_URL).rstrip("/")

    @property
    def on_change(self) -> ChangeHandler | None:
        return self.source.on_change

    @on_change.setter
    def on_change(self, handler: ChangeHandler | None) -> None:
        self.source.on_change = handler

    def expand(self, url: str) -> str:
        return expand_url(url, self.base_url)

    async def fetch_one(self, url: str) -> Any:
        return await self.source.fetch_one(self.expand(url))

    async def fetch_list(self, url: str, page: int | None = None) -> Page | list[Any]:
        return await self.source.fetch_list(self.expand(url), page=page)

    async def fetch_multiple(
        self,
        urls: Sequence[str],
        minimum: MinimumOption = None,
    ) -> list[Any]:
        return await self.source.fetch_multiple([self.expand(u) for u in urls], minimum=minimum)

    async def aclose(self) -> None:
        await self.source.aclose()

    async def __aenter__(self) -> Swapi:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["Swapi", "expand_url"]
