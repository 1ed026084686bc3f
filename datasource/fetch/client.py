# datasource/fetch/client.py
from __future__ import annotations

import logging
from typing import Any

import httpx

from .. import config
from ..exceptions import DecodeFailure, NetworkFailure

log = logging.getLogger(__name__)


class JsonClient:
    """
    Small async wrapper around httpx that GETs a URL and decodes the JSON body.

    Flow:
      1) GET url (redirects followed)
      2) transport error      → NetworkFailure(status=None)
      3) status >= 400        → NetworkFailure(status=<code>)
      4) body is not JSON     → DecodeFailure

    No caching and no retries here; deduplication lives in DataSource.
    """

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.user_agent = user_agent or config.FETCH_USER_AGENT
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": self.user_agent, "Accept": config.FETCH_ACCEPT},
            timeout=httpx.Timeout(
                config.FETCH_READ_TIMEOUT_S, connect=config.FETCH_CONNECT_TIMEOUT_S
            ),
            follow_redirects=True,
            max_redirects=config.FETCH_MAX_REDIRECTS,
        )

    # ---- core fetch ------------------------------------------------------------------

    async def get_json(self, url: str) -> Any:
        log.debug("GET %s", url)
        try:
            resp = await self._client.get(url)
        except httpx.RequestError as exc:
            log.warning("GET %s failed: %s", url, type(exc).__name__)
            raise NetworkFailure(url, message=f"{type(exc).__name__} fetching {url}") from exc

        status = int(resp.status_code)
        if status >= 400:
            log.warning("GET %s returned HTTP %d", url, status)
            raise NetworkFailure(url, status=status)

        try:
            return resp.json()
        except ValueError as exc:
            log.warning("GET %s returned a non-JSON body", url)
            raise DecodeFailure(url, f"Malformed JSON from {url}") from exc

    # ----------------------------------------------------------------------------------
    # Context manager
    # ----------------------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> JsonClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["JsonClient"]
