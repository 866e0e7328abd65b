"""Use cases for flagging notifications as read."""

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Notification
from listing_alerts.infrastructure.repositories import NotificationRepository


def mark_notification_read(
    session: Session, *, recipient_id: int, notification_id: int
) -> Notification:
    """Mark one notification as read or raise ``NotFoundError``.

    Marking an already read notification succeeds without changes.
    """

    return NotificationRepository(session).mark_read(recipient_id, notification_id)


def mark_all_notifications_read(session: Session, *, recipient_id: int) -> int:
    """Return how many unread notifications were flagged as read."""

    return NotificationRepository(session).mark_all_read(recipient_id)
