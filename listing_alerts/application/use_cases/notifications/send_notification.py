"""Use case for the direct single-recipient notification path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Notification, NotificationDraft
from listing_alerts.domain.errors import DispatchError, StorageError, ValidationError
from listing_alerts.infrastructure.push import PlatformHints, PushDispatcher
from listing_alerts.infrastructure.repositories import (
    NotificationRepository,
    RecipientRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendNotificationResult:
    """Outcome of a direct send: push and persistence are reported separately."""

    push_delivered: bool
    notification: Notification | None


def send_notification(
    session: Session,
    *,
    dispatcher: PushDispatcher,
    title: str,
    body: str,
    token: str | None = None,
    recipient_id: int | None = None,
    category: str = "system",
    payload: dict[str, Any] | None = None,
    platform_hints: PlatformHints | None = None,
) -> SendNotificationResult:
    """Push to ``token`` and/or store one record for ``recipient_id``.

    Either target may be omitted but not both. A push failure never prevents
    the record from being stored.
    """

    if not token and recipient_id is None:
        raise ValidationError("A device token or a recipient id is required")
    if not title.strip() or not body.strip():
        raise ValidationError("Title and body are required")
    if recipient_id is not None and RecipientRepository(session).get(recipient_id) is None:
        raise ValidationError(f"Recipient {recipient_id} does not exist")

    push_delivered = False
    if token:
        try:
            report = dispatcher.dispatch([token], title, body, platform_hints)
        except DispatchError as exc:
            logger.warning("Direct push notification failed: %s", exc)
        else:
            push_delivered = report.succeeded > 0

    notification = None
    if recipient_id is not None:
        draft = NotificationDraft(
            recipient_id=recipient_id,
            title=title,
            body=body,
            category=category,
            payload=payload or {},
        )
        try:
            notification = NotificationRepository(session).create(draft)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError("Could not store the notification") from exc

    return SendNotificationResult(push_delivered=push_delivered, notification=notification)


__all__ = ["SendNotificationResult", "send_notification"]
