"""Error taxonomy shared by the listing alert pipeline."""

from __future__ import annotations


class ListingAlertsError(Exception):
    """Base class for errors raised by the listing alerts service."""


class ValidationError(ListingAlertsError, ValueError):
    """Input was rejected before any side effect took place."""


class NotFoundError(ListingAlertsError, ValueError):
    """The target does not exist within the caller's recipient scope."""


class DispatchError(ListingAlertsError):
    """The push transport could not deliver a batch at all."""

    def __init__(self, message: str, *, attempted: int = 0) -> None:
        super().__init__(message)
        self.attempted = attempted


class StorageError(ListingAlertsError):
    """The notification store could not be reached or written."""


__all__ = [
    "DispatchError",
    "ListingAlertsError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
