"""Domain entity describing a freshly created marketplace listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ListingContext:
    """Attributes of a listing that recipient resolution may filter on.

    ``attributes`` carries whatever extra fields the listing source supplies
    (location, price, tags) so new filters can use them without changing the
    callers.
    """

    id: str
    make: str
    model: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def alert_payload(self) -> dict[str, Any]:
        """Return the metadata attached to every notification for the listing."""

        payload = dict(self.attributes)
        payload.update({"listingId": self.id, "make": self.make, "model": self.model})
        return payload


__all__ = ["ListingContext"]
