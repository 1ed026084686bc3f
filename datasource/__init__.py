# datasource/__init__.py
"""Async client for paginated Django-REST-style JSON APIs."""

from .exceptions import DecodeFailure, FetchError, NetworkFailure
from .fetch import ChangeEvent, DataSource, Page
from .swapi import Swapi

__all__ = [
    "DataSource",
    "ChangeEvent",
    "Page",
    "Swapi",
    "FetchError",
    "NetworkFailure",
    "DecodeFailure",
]

__version__ = "0.1.0"
