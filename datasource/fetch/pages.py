# datasource/fetch/pages.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .source import DataSource


@dataclass(frozen=True)
class Page(Sequence):
    """
    Immutable snapshot of a list endpoint fetched page by page.

    ``items`` holds everything gathered so far, ``next_url`` is the cursor for
    the next page (None once the list is exhausted) and ``pages`` is the number
    of pages behind this snapshot. ``await page.more()`` yields the next
    snapshot; a snapshot is never modified after it is handed out.
    """

    url: str
    items: tuple[Any, ...] = ()
    next_url: str | None = None
    pages: int = 0
    source: DataSource | None = field(default=None, repr=False, compare=False)

    # items are JSON objects (dicts)
    __hash__ = None

    def __getitem__(self, index):
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    @property
    def exhausted(self) -> bool:
        return self.next_url is None

    def extend(self, results: Sequence[Any], next_url: str | None) -> Page:
        return Page(
            url=self.url,
            items=self.items + tuple(results),
            next_url=next_url,
            pages=self.pages + 1,
            source=self.source,
        )

    async def more(self) -> Page:
        if self.source is None:
            raise RuntimeError("Page is not bound to a DataSource")
        return await self.source.fetch_more(self)


def append_page(url: str, page: int) -> str:
    """
    Address page ``page`` of a list endpoint.

    Page 1 is the bare URL; later pages add ``page=N`` with ``?`` or ``&``
    depending on whether the URL already carries a query string.
    """
    if page == 1:
        return url
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}page={page}"


__all__ = ["Page", "append_page"]
