# datasource/fetch/store.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..exceptions import RecordExistsError

if TYPE_CHECKING:
    from .pages import Page

# --------------------------------------------------------------------------------------
# Model
# --------------------------------------------------------------------------------------


class Kind(str, Enum):
    OBJECT = "object"
    LIST = "list"


@dataclass(frozen=True)
class Record:
    url: str
    kind: Kind
    future: asyncio.Task[Any] | None = None  # in-flight (or last) network call
    # Kind.OBJECT
    result: Any = None
    done: bool = False  # result holds a successfully decoded value
    # Kind.LIST
    page: Page | None = None  # latest accumulated snapshot
    next_url: str | None = None  # continuation cursor; None once exhausted

    # result and page hold unhashable JSON values
    __hash__ = None

    @property
    def key(self) -> tuple[str, Kind]:
        return self.url, self.kind


# --------------------------------------------------------------------------------------
# Store
# --------------------------------------------------------------------------------------


class RequestStore:
    """
    Keyed registry of tracked fetches, one Record per (url, kind).

    Records are immutable: update() swaps in a new Record object and a new
    ``records`` tuple, so observers comparing by identity notice the change.
    Nothing is ever removed.
    """

    def __init__(self) -> None:
        self._by_key: dict[tuple[str, Kind], Record] = {}
        self.records: tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self._by_key)

    # ---- public API ------------------------------------------------------------------

    def find(self, url: str, kind: Kind) -> Record | None:
        return self._by_key.get((url, kind))

    def create(self, url: str, kind: Kind) -> Record:
        key = (url, kind)
        if key in self._by_key:
            raise RecordExistsError(key)
        record = Record(url=url, kind=kind)
        self._by_key[key] = record
        # newest first
        self.records = (record,) + self.records
        return record

    def update(self, record: Record, **fields: Any) -> Record:
        """
        Merge ``fields`` onto the stored record for ``record``'s key.

        Fields are applied to the current stored version, not to the (possibly
        stale) object passed in. Returns the new Record.
        """
        current = self._by_key.get(record.key)
        if current is None:
            raise KeyError(record.key)
        updated = replace(current, **fields)
        self._by_key[record.key] = updated
        self.records = tuple(updated if r is current else r for r in self.records)
        return updated


__all__ = ["Kind", "Record", "RequestStore"]
