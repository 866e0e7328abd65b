"""Pydantic models for listing events received from the listing source."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .base import CamelModel


class ListingCreatedRequest(CamelModel):
    """A listing that has just been durably created.

    Fields beyond ``id``, ``make`` and ``model`` are kept as listing
    attributes and copied into each notification payload.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, max_length=64)
    make: str = Field(..., min_length=1, max_length=80)
    model: str = Field(..., min_length=1, max_length=80)

    def extra_attributes(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ListingNotificationRead(CamelModel):
    """Counts attached to the listing-creation response."""

    notifications_sent: int
    notifications_saved: int


__all__ = ["ListingCreatedRequest", "ListingNotificationRead"]
