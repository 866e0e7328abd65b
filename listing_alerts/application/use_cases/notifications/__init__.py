"""Use cases for reading and managing a recipient's notifications."""

from .count_unread_notifications import count_unread_notifications
from .delete_notification import delete_all_notifications, delete_notification
from .list_notifications import list_notifications
from .mark_notification_read import mark_all_notifications_read, mark_notification_read
from .register_device_token import register_device_token
from .send_notification import SendNotificationResult, send_notification

__all__ = [
    "SendNotificationResult",
    "count_unread_notifications",
    "delete_all_notifications",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "register_device_token",
    "send_notification",
]
