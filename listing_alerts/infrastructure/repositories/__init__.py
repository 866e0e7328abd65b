"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .recipient_repository import RecipientRepository

__all__ = [
    "NotificationRepository",
    "RecipientRepository",
]
