from .listing import ListingCreatedRequest, ListingNotificationRead
from .notification import (
    DeleteAllResponse,
    MarkAllReadResponse,
    MessageResponse,
    NotificationPageRead,
    NotificationRead,
    PaginationRead,
    RegisterTokenRequest,
    SendNotificationRequest,
    SendNotificationResponse,
    UnreadCountRead,
)

__all__ = [
    "DeleteAllResponse",
    "ListingCreatedRequest",
    "ListingNotificationRead",
    "MarkAllReadResponse",
    "MessageResponse",
    "NotificationPageRead",
    "NotificationRead",
    "PaginationRead",
    "RegisterTokenRequest",
    "SendNotificationRequest",
    "SendNotificationResponse",
    "UnreadCountRead",
]
