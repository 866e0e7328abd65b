"""Use cases triggered by listing events."""

from .notify_listing_created import (
    ListingAlertMessage,
    build_listing_alert,
    notify_listing_created,
)
from .resolve_recipients import (
    RecipientFilter,
    RecipientResolver,
    default_recipient_filters,
    require_device_token,
)

__all__ = [
    "ListingAlertMessage",
    "RecipientFilter",
    "RecipientResolver",
    "build_listing_alert",
    "default_recipient_filters",
    "notify_listing_created",
    "require_device_token",
]
