"""Use case for registering a device push token."""

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import SUPPORTED_PLATFORMS, Recipient
from listing_alerts.domain.errors import ValidationError
from listing_alerts.infrastructure.push import normalize_tokens
from listing_alerts.infrastructure.repositories import RecipientRepository


def register_device_token(
    session: Session,
    *,
    recipient_id: int,
    token: str,
    platform: str | None = None,
) -> Recipient:
    """Attach ``token`` to the recipient so future alerts reach the device."""

    normalized = normalize_tokens([token])
    if not normalized:
        raise ValidationError("Device token is empty or malformed")
    if platform is not None and platform not in SUPPORTED_PLATFORMS:
        raise ValidationError(f"Unsupported platform '{platform}'")

    return RecipientRepository(session).register_device_token(
        recipient_id, normalized[0], platform=platform
    )
