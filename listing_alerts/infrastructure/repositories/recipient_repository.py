"""Read access to the recipient directory and device token registration."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from listing_alerts.domain.entities import Recipient
from listing_alerts.domain.errors import NotFoundError
from listing_alerts.infrastructure.models import DeviceTokenModel, RecipientModel


class RecipientRepository:
    """Query recipients and the device tokens registered for them."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, recipient_id: int) -> Recipient | None:
        model = self.session.get(RecipientModel, recipient_id)
        return self._to_entity(model) if model else None

    def list_active(self) -> Sequence[Recipient]:
        query = (
            select(RecipientModel)
            .where(RecipientModel.is_active.is_(True))
            .order_by(RecipientModel.id)
        )
        return [self._to_entity(model) for model in self.session.scalars(query).all()]

    def create(
        self,
        *,
        name: str | None = None,
        platform: str | None = None,
        is_active: bool = True,
        device_tokens: Sequence[str] = (),
    ) -> Recipient:
        model = RecipientModel(name=name, platform=platform, is_active=is_active)
        model.device_tokens = [DeviceTokenModel(token=token) for token in device_tokens]
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def register_device_token(
        self, recipient_id: int, token: str, *, platform: str | None = None
    ) -> Recipient:
        """Attach ``token`` to ``recipient_id``, moving it from any previous owner."""

        recipient = self.session.get(RecipientModel, recipient_id)
        if recipient is None:
            raise NotFoundError(f"Recipient {recipient_id} not found")

        existing = self.session.scalar(
            select(DeviceTokenModel).where(DeviceTokenModel.token == token)
        )
        if existing is None:
            self.session.add(DeviceTokenModel(recipient_id=recipient_id, token=token))
        elif existing.recipient_id != recipient_id:
            existing.recipient_id = recipient_id
            self.session.add(existing)

        if platform:
            recipient.platform = platform
            self.session.add(recipient)

        self.session.commit()
        self.session.expire_all()
        refreshed = self.session.get(RecipientModel, recipient_id)
        return self._to_entity(refreshed)

    @staticmethod
    def _to_entity(model: RecipientModel) -> Recipient:
        return Recipient(
            id=model.id,
            name=model.name,
            platform=model.platform,
            is_active=bool(model.is_active),
            device_tokens=[device.token for device in model.device_tokens],
        )


__all__ = ["RecipientRepository"]
