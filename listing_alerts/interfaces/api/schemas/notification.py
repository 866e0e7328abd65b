"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, Field

from .base import CamelModel


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: int
    category: str
    title: str
    body: str
    payload: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime


class PaginationRead(CamelModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class NotificationPageRead(CamelModel):
    """One page of notifications plus the metadata needed to fetch the rest."""

    data: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountRead(CamelModel):
    unread_count: int


class MarkAllReadResponse(CamelModel):
    modified_count: int


class DeleteAllResponse(CamelModel):
    deleted_count: int


class MessageResponse(CamelModel):
    message: str


class SendNotificationRequest(CamelModel):
    """Payload for the direct single-recipient send path."""

    model_config = ConfigDict(extra="forbid")

    token: str | None = Field(default=None, max_length=4096)
    recipient_id: int | None = Field(default=None, ge=1)
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    category: str = Field(default="system", min_length=1, max_length=50)
    data: dict[str, Any] = Field(default_factory=dict)


class SendNotificationResponse(CamelModel):
    success: bool
    push_delivered: bool
    notification: NotificationRead | None = None


class RegisterTokenRequest(CamelModel):
    """Device token announced by a recipient's client application."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(..., min_length=1, max_length=4096)
    platform: Literal["android", "ios", "web"] | None = None


__all__ = [
    "DeleteAllResponse",
    "MarkAllReadResponse",
    "MessageResponse",
    "NotificationPageRead",
    "NotificationRead",
    "PaginationRead",
    "RegisterTokenRequest",
    "SendNotificationRequest",
    "SendNotificationResponse",
    "UnreadCountRead",
]
