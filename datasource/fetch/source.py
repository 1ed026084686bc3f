# datasource/fetch/source.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..exceptions import DecodeFailure, FetchError
from .client import JsonClient
from .minimum import MinimumOption, resolve_minimum
from .pages import Page, append_page
from .store import Kind, RequestStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    type: str
    target: DataSource


ChangeHandler = Callable[[ChangeEvent], None]


class DataSource:
    """
    Request coordination and caching over a paginated JSON API.

    Every fetch goes through the RequestStore so that concurrent callers for the
    same (url, kind) share one network call:

      - fetch_one(url)                  one object, cached
      - fetch_list(url)                 first page, then page.more() on demand
      - fetch_list(url, page=n)         exactly one page, no accumulation
      - fetch_multiple(urls, minimum)   return early with cached entries when
                                        enough of them are cached

    ``on_change`` is a single callback slot invoked when background work changes
    data a caller has already seen (a later list page, or the remainder of a
    partial fetch_multiple()).
    """

    def __init__(
        self,
        *,
        client: JsonClient | None = None,
        store: RequestStore | None = None,
    ) -> None:
        self.client = client if client is not None else JsonClient()
        self.store = store if store is not None else RequestStore()
        self.on_change: ChangeHandler | None = None
        self._background: set[asyncio.Task[Any]] = set()

    # ---- change notification ---------------------------------------------------------

    def trigger_change(self) -> None:
        if self.on_change is not None:
            self.on_change(ChangeEvent(type="change", target=self))

    # ---- single object ---------------------------------------------------------------

    async def fetch_one(self, url: str) -> Any:
        return await asyncio.shield(self._begin_object(url))

    def _begin_object(self, url: str) -> asyncio.Task[Any]:
        """Return the shared task for ``url``, starting one if none is usable."""
        record = self.store.find(url, Kind.OBJECT)
        if record is None:
            record = self.store.create(url, Kind.OBJECT)
        elif record.future is not None:
            log.debug("coalesced fetch of %s", url)
            return record.future

        task = asyncio.create_task(self._load_object(url))
        self.store.update(record, future=task)
        return task

    async def _load_object(self, url: str) -> Any:
        record = self.store.find(url, Kind.OBJECT)
        try:
            result = await self.client.get_json(url)
        except (FetchError, asyncio.CancelledError):
            # retry on next request
            self.store.update(record, future=None)
            raise
        self.store.update(record, result=result, done=True)
        return result

    # ---- lists -----------------------------------------------------------------------

    async def fetch_list(self, url: str, page: int | None = None) -> Page | list[Any]:
        """
        Fetch a list endpoint.

        With ``page`` the items of that single page are returned as a list.
        Without it the latest accumulated Page snapshot for ``url`` is returned,
        fetching the first page if this is the first request.
        """
        if page:
            payload = await self.fetch_one(append_page(url, page))
            return list(_results(append_page(url, page), payload))

        record = self.store.find(url, Kind.LIST)
        if record is None:
            record = self.store.create(url, Kind.LIST)
            record = self.store.update(
                record, page=Page(url=url, next_url=url, source=self), next_url=url
            )
        if record.page is not None and record.page.pages > 0:
            return record.page
        return await self.fetch_more(record.page)

    async def fetch_more(self, page: Page) -> Page:
        """
        Return the snapshot that follows ``page``.

        A newer snapshot already in the store is returned as is; a page fetch in
        flight is shared; an exhausted list returns its final snapshot without a
        network call.
        """
        record = self.store.find(page.url, Kind.LIST)
        if record is None:
            raise KeyError((page.url, Kind.LIST))

        latest = record.page
        if latest is not None and latest.pages > page.pages:
            return latest
        if record.future is None:
            if latest is not None and latest.exhausted:
                return latest
            task = asyncio.create_task(self._load_page(page.url))
            record = self.store.update(record, future=task)
        else:
            log.debug("coalesced page fetch of %s", page.url)
        return await asyncio.shield(record.future)

    async def _load_page(self, url: str) -> Page:
        record = self.store.find(url, Kind.LIST)
        next_url = record.next_url
        try:
            payload = await self.client.get_json(next_url)
            results = _results(next_url, payload)
        except (FetchError, asyncio.CancelledError):
            self.store.update(record, future=None)
            raise

        record = self.store.find(url, Kind.LIST)
        snapshot = record.page.extend(results, payload.get("next") or None)
        self.store.update(record, page=snapshot, next_url=snapshot.next_url, future=None)
        log.debug("fetched page %d of %s (%d items)", snapshot.pages, url, len(snapshot))

        if snapshot.pages > 1:
            self.trigger_change()
        return snapshot

    # ---- many objects ----------------------------------------------------------------

    async def fetch_multiple(
        self,
        urls: Sequence[str],
        minimum: MinimumOption = None,
    ) -> list[Any]:
        """
        Fetch several objects, keeping the order of ``urls``.

        When at least ``minimum`` of them are already cached the call returns at
        once, with None in place of the entries still loading; on_change fires
        when those arrive. Otherwise it waits for all of them.
        """
        threshold = resolve_minimum(minimum, len(urls))
        entries: list[Any] = []
        pending: list[asyncio.Task[Any]] = []
        cached = 0
        for url in urls:
            record = self.store.find(url, Kind.OBJECT)
            if record is not None and record.done:
                cached += 1
                entries.append(record.result)
            else:
                task = self._begin_object(url)
                pending.append(task)
                entries.append(task)

        if not pending:
            return entries

        if cached < threshold:
            results = iter(await asyncio.gather(*(asyncio.shield(t) for t in pending)))
            return [next(results) if isinstance(e, asyncio.Task) else e for e in entries]

        self._spawn(self._complete_then_notify(pending))
        return [None if isinstance(e, asyncio.Task) else e for e in entries]

    async def _complete_then_notify(self, pending: list[asyncio.Task[Any]]) -> None:
        try:
            await asyncio.gather(*pending)
        except FetchError as exc:
            log.warning("background completion failed for %s: %s", exc.url, exc)
            return
        try:
            self.trigger_change()
        except Exception:
            # nobody awaits this task
            log.exception("on_change handler failed")

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    # ----------------------------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------------------------

    async def aclose(self) -> None:
        """Wait for background completions, then close the HTTP client."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        await self.client.aclose()

    async def __aenter__(self) -> DataSource:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _results(url: str, payload: Any) -> list[Any]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise DecodeFailure(url, f"List payload from {url} has no 'results' list")
    return results


__all__ = ["ChangeEvent", "ChangeHandler", "DataSource"]
