"""ORM models used by the application infrastructure."""

from .recipient import DeviceTokenModel, RecipientModel
from .notification import NotificationModel

__all__ = [
    "DeviceTokenModel",
    "NotificationModel",
    "RecipientModel",
]
