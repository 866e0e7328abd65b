"""Fan a newly created listing out to push delivery and the notification feed."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import anyio
from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from listing_alerts.config import Settings, get_settings
from listing_alerts.domain.entities import (
    PLATFORM_ANDROID,
    PLATFORM_IOS,
    ListingContext,
    ListingNotificationSummary,
    NotificationDraft,
    Recipient,
)
from listing_alerts.domain.errors import DispatchError, StorageError
from listing_alerts.infrastructure.push import PushDispatcher
from listing_alerts.infrastructure.repositories import NotificationRepository

from .resolve_recipients import RecipientFilter, RecipientResolver, default_recipient_filters

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


@dataclass(frozen=True)
class ListingAlertMessage:
    """Content shared by every push and feed entry for one listing."""

    title: str
    body: str
    category: str
    payload: dict[str, Any] = field(default_factory=dict)
    platform_hints: dict[str, dict[str, Any]] = field(default_factory=dict)


def build_listing_alert(
    listing: ListingContext,
    recipients: Sequence[Recipient],
    *,
    settings: Settings | None = None,
) -> ListingAlertMessage:
    """Render the configured alert for ``listing``.

    Sound hints are attached for the platforms present among ``recipients``.
    A recipient without a platform tag may be on Android or iOS, so both
    hints are sent whenever one is present.
    """

    settings = settings or get_settings()
    body = settings.listing_alert_body_template.format(
        make=listing.make, model=listing.model, listing_id=listing.id
    )

    platforms = {recipient.platform for recipient in recipients}
    if None in platforms or not platforms:
        platforms |= {PLATFORM_ANDROID, PLATFORM_IOS}

    hints: dict[str, dict[str, Any]] = {}
    if PLATFORM_ANDROID in platforms and settings.push_android_sound:
        hints[PLATFORM_ANDROID] = {"sound": settings.push_android_sound}
    if PLATFORM_IOS in platforms and settings.push_ios_sound:
        hints[PLATFORM_IOS] = {"sound": settings.push_ios_sound}

    return ListingAlertMessage(
        title=settings.listing_alert_title,
        body=body,
        category=settings.listing_alert_category,
        payload=listing.alert_payload(),
        platform_hints=hints,
    )


def _resolve(
    session_factory: SessionFactory,
    listing: ListingContext,
    filters: Sequence[RecipientFilter],
) -> list[Recipient]:
    with session_factory() as session:
        return RecipientResolver(session, filters=filters).resolve(listing)


def _persist(session_factory: SessionFactory, drafts: list[NotificationDraft]) -> int:
    with session_factory() as session:
        return NotificationRepository(session).create_many(drafts)


async def notify_listing_created(
    listing: ListingContext,
    *,
    session_factory: SessionFactory,
    dispatcher: PushDispatcher,
    filters: Sequence[RecipientFilter] | None = None,
    message: ListingAlertMessage | None = None,
) -> ListingNotificationSummary:
    """Resolve recipients, then push and persist concurrently.

    Push delivery and persistence are independent: a failure in one is
    logged and reported through its count without affecting the other.
    """

    if filters is None:
        filters = default_recipient_filters(
            require_token=get_settings().listing_alerts_require_device_token
        )

    try:
        recipients = await to_thread.run_sync(_resolve, session_factory, listing, filters)
    except SQLAlchemyError:
        logger.exception("Could not resolve recipients for listing %s", listing.id)
        return ListingNotificationSummary()

    if not recipients:
        logger.info("No recipients resolved for listing %s", listing.id)
        return ListingNotificationSummary()

    message = message or build_listing_alert(listing, recipients)
    drafts = [
        NotificationDraft(
            recipient_id=recipient.id,
            title=message.title,
            body=message.body,
            category=message.category,
            payload=dict(message.payload),
        )
        for recipient in recipients
    ]
    tokens = [token for recipient in recipients for token in recipient.device_tokens]

    sent = 0
    saved = 0

    async def _dispatch_branch() -> None:
        nonlocal sent
        try:
            report = await to_thread.run_sync(
                dispatcher.dispatch,
                tokens,
                message.title,
                message.body,
                message.platform_hints,
            )
        except DispatchError as exc:
            logger.warning("Push alert for listing %s not delivered: %s", listing.id, exc)
            return
        except Exception:
            logger.exception("Unexpected push failure for listing %s", listing.id)
            return
        sent = report.succeeded

    async def _store_branch() -> None:
        nonlocal saved
        try:
            saved = await to_thread.run_sync(_persist, session_factory, drafts)
        except (StorageError, SQLAlchemyError):
            logger.exception("Could not persist notifications for listing %s", listing.id)
        except Exception:
            logger.exception(
                "Unexpected failure persisting notifications for listing %s", listing.id
            )

    # Worker threads are not interruptible, so a started write runs to completion.
    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_dispatch_branch)
        task_group.start_soon(_store_branch)

    logger.info(
        "Listing %s alert: %s recipients, %s pushes delivered, %s notifications saved",
        listing.id,
        len(recipients),
        sent,
        saved,
    )
    return ListingNotificationSummary(notifications_sent=sent, notifications_saved=saved)


__all__ = [
    "ListingAlertMessage",
    "build_listing_alert",
    "notify_listing_created",
]
