"""Aggregate result of notifying recipients about a listing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ListingNotificationSummary:
    """Counts attached to the listing-creation response.

    The two counts are independent: a recipient without a device token is
    saved but never sent, and a push failure does not reduce ``saved``.
    """

    notifications_sent: int = 0
    notifications_saved: int = 0


__all__ = ["ListingNotificationSummary"]
