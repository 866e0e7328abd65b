"""Use case for paging through a recipient's notifications."""

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Notification, Page
from listing_alerts.infrastructure.repositories import NotificationRepository
from listing_alerts.utils.pagination import NOTIFICATIONS_PAGE_SIZE


def list_notifications(
    session: Session,
    *,
    recipient_id: int,
    page: int | None = 1,
    page_size: int | None = None,
    default_page_size: int = NOTIFICATIONS_PAGE_SIZE,
) -> Page[Notification]:
    """Return one page of notifications, newest first."""

    return NotificationRepository(session).list_page(
        recipient_id,
        page=page,
        page_size=page_size,
        default_page_size=default_page_size,
    )
