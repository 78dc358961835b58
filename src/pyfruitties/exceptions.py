"""Custom exception hierarchy for pyfruitties.

Cancellation is not part of this hierarchy: it is always the native
:class:`asyncio.CancelledError` and is never converted into one of these.
"""

from __future__ import annotations


class FruittiesError(Exception):
    """Base exception for all pyfruitties errors."""


class FruittiesConfigError(FruittiesError):
    """Invalid or missing configuration."""


class StorageError(FruittiesError):
    """Local store failure (constraint violation, I/O error, closed store)."""


class CartEntryNotFoundError(StorageError):
    """An update targeted a cart entry that does not exist."""

    def __init__(self, message: str, *, fruit_id: int) -> None:
        self.fruit_id = fruit_id
        super().__init__(message)


class FetchError(FruittiesError):
    """Remote feed failure (network, non-200, invalid JSON, undecodable body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)
