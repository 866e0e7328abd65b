"""Domain entities representing recipient notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Notification:
    """Notification entry stored in a recipient's feed."""

    id: int | None
    recipient_id: int
    category: str
    title: str
    body: str
    payload: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class NotificationDraft:
    """Unsaved notification handed to the store for insertion."""

    recipient_id: int
    title: str
    body: str
    category: str
    payload: dict[str, Any] = field(default_factory=dict)


__all__ = ["Notification", "NotificationDraft"]
