# datasource/fetch/__init__.py
"""
Request coordination over a paginated JSON API: deduplicated fetches, on-demand
pagination, and partial multi-object fetches with change notification.

Caller-facing API:
  - DataSource.fetch_one(url) -> object
  - DataSource.fetch_list(url, page=None) -> Page | list
  - DataSource.fetch_multiple(urls, minimum=None) -> list[object | None]
  - DataSource.on_change = callback(ChangeEvent)

Other public entry points (advanced/internal use):
  - RequestStore, Record, Kind
  - JsonClient
  - Page, append_page
  - threshold variants: All, AtLeastOne, Percentage, AbsoluteCount, AllBut
"""

from .client import JsonClient
from .minimum import (
    AbsoluteCount,
    All,
    AllBut,
    AtLeastOne,
    Percentage,
    parse_minimum,
    resolve_minimum,
)
from .pages import Page, append_page
from .source import ChangeEvent, DataSource
from .store import Kind, Record, RequestStore

__all__ = [
    # caller-facing
    "DataSource",
    "ChangeEvent",
    "Page",
    # store
    "RequestStore",
    "Record",
    "Kind",
    # transport
    "JsonClient",
    # helpers
    "append_page",
    "parse_minimum",
    "resolve_minimum",
    "All",
    "AtLeastOne",
    "Percentage",
    "AbsoluteCount",
    "AllBut",
]
