"""Domain entities exposed by the application."""

from .dispatch import DispatchOutcome, DispatchReport
from .listing import ListingContext
from .listing_notification_summary import ListingNotificationSummary
from .notification import Notification, NotificationDraft
from .page import Page
from .recipient import (
    PLATFORM_ANDROID,
    PLATFORM_IOS,
    PLATFORM_WEB,
    SUPPORTED_PLATFORMS,
    Recipient,
)

__all__ = [
    "DispatchOutcome",
    "DispatchReport",
    "ListingContext",
    "ListingNotificationSummary",
    "Notification",
    "NotificationDraft",
    "Page",
    "PLATFORM_ANDROID",
    "PLATFORM_IOS",
    "PLATFORM_WEB",
    "Recipient",
    "SUPPORTED_PLATFORMS",
]
