"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Notification, NotificationDraft, Page
from listing_alerts.domain.errors import NotFoundError, StorageError
from listing_alerts.infrastructure.models import NotificationModel, RecipientModel
from listing_alerts.utils import (
    clamp_pagination,
    ensure_app_timezone,
    now_in_app_naive_datetime,
    total_pages,
)
from listing_alerts.utils.pagination import NOTIFICATIONS_PAGE_SIZE

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Every read and mutation takes the owning ``recipient_id`` as part of its
    predicate, so a caller can never touch another recipient's rows.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, draft: NotificationDraft) -> Notification:
        model = self._draft_to_model(draft, created_at=now_in_app_naive_datetime())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def create_many(self, drafts: Sequence[NotificationDraft]) -> int:
        """Insert ``drafts`` and return how many rows were persisted.

        Drafts pointing at unknown or malformed recipients are skipped. The
        rest go in a single transaction; if that fails each row is retried in
        its own transaction so one bad record cannot sink the others.
        """

        insertable = self._filter_insertable(drafts)
        if not insertable:
            return 0

        created_at = now_in_app_naive_datetime()
        try:
            self.session.add_all(
                [self._draft_to_model(draft, created_at=created_at) for draft in insertable]
            )
            self.session.commit()
            return len(insertable)
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning(
                "Bulk insert of %s notifications failed; retrying one by one",
                len(insertable),
                exc_info=True,
            )

        persisted = 0
        for draft in insertable:
            try:
                self.session.add(self._draft_to_model(draft, created_at=created_at))
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                logger.warning(
                    "Could not persist notification for recipient %s",
                    draft.recipient_id,
                    exc_info=True,
                )
                continue
            persisted += 1
        return persisted

    def list_page(
        self,
        recipient_id: int,
        *,
        page: int | None = 1,
        page_size: int | None = None,
        default_page_size: int = NOTIFICATIONS_PAGE_SIZE,
    ) -> Page[Notification]:
        page, page_size = clamp_pagination(
            page, page_size, default_page_size=default_page_size
        )
        total = self.session.scalar(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.recipient_id == recipient_id
            )
        ) or 0
        query = (
            select(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
            # Equal timestamps keep insertion order.
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        items = [self._to_entity(model) for model in self.session.scalars(query).all()]
        return Page(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total, page_size),
        )

    def count_unread(self, recipient_id: int) -> int:
        count = self.session.scalar(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
        )
        return int(count or 0)

    def mark_read(self, recipient_id: int, notification_id: int) -> Notification:
        model = self._get_owned(recipient_id, notification_id)
        if not model.is_read:
            model.is_read = True
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_read(self, recipient_id: int) -> int:
        result = self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return int(result.rowcount or 0)

    def delete(self, recipient_id: int, notification_id: int) -> None:
        result = self.session.execute(
            delete(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            self.session.rollback()
            raise NotFoundError(f"Notification {notification_id} not found")
        self.session.commit()

    def delete_all(self, recipient_id: int) -> int:
        result = self.session.execute(
            delete(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return int(result.rowcount or 0)

    def _get_owned(self, recipient_id: int, notification_id: int) -> NotificationModel:
        model = self.session.scalar(
            select(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
        )
        if model is None:
            raise NotFoundError(f"Notification {notification_id} not found")
        return model

    def _filter_insertable(
        self, drafts: Sequence[NotificationDraft]
    ) -> list[NotificationDraft]:
        candidates = [
            draft
            for draft in drafts
            if isinstance(draft.recipient_id, int)
            and not isinstance(draft.recipient_id, bool)
            and draft.recipient_id > 0
        ]
        if len(candidates) != len(drafts):
            logger.warning(
                "Skipping %s notification drafts with malformed recipient ids",
                len(drafts) - len(candidates),
            )
        if not candidates:
            return []

        recipient_ids = {draft.recipient_id for draft in candidates}
        try:
            existing = set(
                self.session.scalars(
                    select(RecipientModel.id).where(RecipientModel.id.in_(recipient_ids))
                ).all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError("Recipient directory lookup failed") from exc

        insertable = [draft for draft in candidates if draft.recipient_id in existing]
        missing = recipient_ids - existing
        if missing:
            logger.warning(
                "Skipping notifications for unknown recipients: %s", sorted(missing)
            )
        return insertable

    @staticmethod
    def _draft_to_model(draft: NotificationDraft, *, created_at) -> NotificationModel:
        return NotificationModel(
            recipient_id=draft.recipient_id,
            category=draft.category,
            title=draft.title,
            body=draft.body,
            payload=dict(draft.payload or {}),
            is_read=False,
            created_at=created_at,
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            category=model.category,
            title=model.title,
            body=model.body,
            payload=model.payload or {},
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
