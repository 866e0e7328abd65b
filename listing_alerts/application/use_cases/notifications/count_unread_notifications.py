"""Use case for counting unread notifications."""

from sqlalchemy.orm import Session

from listing_alerts.infrastructure.repositories import NotificationRepository


def count_unread_notifications(session: Session, *, recipient_id: int) -> int:
    return NotificationRepository(session).count_unread(recipient_id)
