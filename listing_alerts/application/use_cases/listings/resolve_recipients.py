"""Resolve who should be alerted about a new listing."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import ListingContext, Recipient
from listing_alerts.domain.errors import ValidationError
from listing_alerts.infrastructure.repositories import RecipientRepository

RecipientFilter = Callable[[ListingContext, Recipient], bool]


def require_device_token(_listing: ListingContext, recipient: Recipient) -> bool:
    """Keep only recipients with at least one registered device token."""

    return recipient.has_device_token()


class RecipientResolver:
    """Produce the ordered recipients for a listing.

    The base policy is every active recipient in the directory. ``filters``
    narrow it further (for example by geography) without callers changing.
    """

    def __init__(
        self, session: Session, *, filters: Sequence[RecipientFilter] = ()
    ) -> None:
        self._repository = RecipientRepository(session)
        self._filters = tuple(filters)

    def resolve(self, listing: ListingContext) -> list[Recipient]:
        if not listing.id or not str(listing.id).strip():
            raise ValidationError("Listing id is required to resolve recipients")

        recipients = list(self._repository.list_active())
        return [
            recipient
            for recipient in recipients
            if all(accepts(listing, recipient) for accepts in self._filters)
        ]


def default_recipient_filters(*, require_token: bool) -> tuple[RecipientFilter, ...]:
    """Return the filters matching the configured resolution policy."""

    return (require_device_token,) if require_token else ()


__all__ = [
    "RecipientFilter",
    "RecipientResolver",
    "default_recipient_filters",
    "require_device_token",
]
