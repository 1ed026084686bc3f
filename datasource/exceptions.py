# datasource/exceptions.py
"""
Shared exception classes used across the codebase.

Fetch failures are always scoped to the resource that was requested; nothing
in the fetch layer raises a process-level error.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for a failed fetch of a single URL."""

    def __init__(self, url: str, message: str | None = None) -> None:
        self.url = url
        super().__init__(message or f"Failed to fetch {url}")


class NetworkFailure(FetchError):
    """
    Raised when the transport fails or the server answers with an HTTP error.

    Examples:
        - DNS / connection / read timeout errors (status is None)
        - 404 Not Found, 500 Internal Server Error (status is the code)
    """

    def __init__(self, url: str, status: int | None = None, message: str | None = None) -> None:
        self.status = status
        if message is None:
            message = (
                f"Network error fetching {url}"
                if status is None
                else f"HTTP {status} fetching {url}"
            )
        super().__init__(url, message)


class DecodeFailure(FetchError):
    """
    Raised when a response body cannot be used as JSON.

    Examples:
        - HTML error page served with a 200
        - A list endpoint payload without a ``results`` list
    """


class RecordExistsError(KeyError):
    """Raised by RequestStore.create() when a record already exists for the key."""


class InvalidMinimum(ValueError):
    """Raised when a fetch_multiple() minimum option cannot be interpreted."""


__all__ = [
    "FetchError",
    "NetworkFailure",
    "DecodeFailure",
    "RecordExistsError",
    "InvalidMinimum",
]
