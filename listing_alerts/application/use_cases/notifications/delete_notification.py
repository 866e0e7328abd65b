"""Use cases for removing notifications from a recipient's feed."""

from sqlalchemy.orm import Session

from listing_alerts.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, *, recipient_id: int, notification_id: int) -> None:
    """Delete one notification owned by ``recipient_id`` or raise ``NotFoundError``."""

    NotificationRepository(session).delete(recipient_id, notification_id)


def delete_all_notifications(session: Session, *, recipient_id: int) -> int:
    return NotificationRepository(session).delete_all(recipient_id)
