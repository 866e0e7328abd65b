"""Endpoints for a recipient's notification feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from listing_alerts.application.use_cases.notifications import (
    count_unread_notifications as count_unread_notifications_uc,
    delete_all_notifications as delete_all_notifications_uc,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notification_read as mark_notification_read_uc,
    register_device_token as register_device_token_uc,
    send_notification as send_notification_uc,
)
from listing_alerts.domain.entities import Notification, Page, Recipient
from listing_alerts.domain.errors import NotFoundError, StorageError, ValidationError
from listing_alerts.infrastructure.database import get_db
from listing_alerts.infrastructure.push import PushDispatcher
from listing_alerts.interfaces.api.dependencies import (
    get_current_active_recipient,
    get_push_dispatcher,
    require_internal_caller,
)
from listing_alerts.interfaces.api.schemas import (
    DeleteAllResponse,
    MarkAllReadResponse,
    MessageResponse,
    NotificationPageRead,
    NotificationRead,
    PaginationRead,
    RegisterTokenRequest,
    SendNotificationRequest,
    SendNotificationResponse,
    UnreadCountRead,
)
from listing_alerts.utils.pagination import NOTIFICATIONS_PAGE_SIZE

router = APIRouter(prefix="/notifications", tags=["notifications"])

_NOT_FOUND_DETAIL = "Notificación no encontrada"


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def page_to_schema(page: Page[Notification]) -> NotificationPageRead:
    return NotificationPageRead(
        data=[_notification_to_schema(notification) for notification in page.items],
        pagination=PaginationRead(
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        ),
    )


@router.post(
    "/register-token",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_token(
    payload: RegisterTokenRequest,
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> MessageResponse:
    """Registra el token del dispositivo del destinatario autenticado."""

    try:
        register_device_token_uc(
            db,
            recipient_id=current_recipient.id,
            token=payload.token,
            platform=payload.platform,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Token received")


@router.post(
    "/send",
    response_model=SendNotificationResponse,
    dependencies=[Depends(require_internal_caller)],
)
def send_notification(
    payload: SendNotificationRequest,
    db: Session = Depends(get_db),
    dispatcher: PushDispatcher = Depends(get_push_dispatcher),
) -> SendNotificationResponse:
    """Envía una notificación directa y la guarda si se indica el destinatario."""

    try:
        result = send_notification_uc(
            db,
            dispatcher=dispatcher,
            title=payload.title,
            body=payload.body,
            token=payload.token,
            recipient_id=payload.recipient_id,
            category=payload.category,
            payload=payload.data,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    notification = (
        _notification_to_schema(result.notification) if result.notification else None
    )
    return SendNotificationResponse(
        success=True,
        push_delivered=result.push_delivered,
        notification=notification,
    )


@router.get("/list", response_model=NotificationPageRead)
def list_notifications(
    page: int = Query(1),
    page_size: int = Query(NOTIFICATIONS_PAGE_SIZE, alias="pageSize"),
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> NotificationPageRead:
    """Devuelve las notificaciones del destinatario, las más recientes primero."""

    result = list_notifications_uc(
        db,
        recipient_id=current_recipient.id,
        page=page,
        page_size=page_size,
    )
    return page_to_schema(result)


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> UnreadCountRead:
    """Devuelve la cantidad de notificaciones sin leer."""

    count = count_unread_notifications_uc(db, recipient_id=current_recipient.id)
    return UnreadCountRead(unread_count=count)


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> MarkAllReadResponse:
    """Marca todas las notificaciones del destinatario como leídas."""

    modified = mark_all_notifications_read_uc(db, recipient_id=current_recipient.id)
    return MarkAllReadResponse(modified_count=modified)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> NotificationRead:
    """Marca una notificación como leída."""

    try:
        notification = mark_notification_read_uc(
            db, recipient_id=current_recipient.id, notification_id=notification_id
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL) from exc
    return _notification_to_schema(notification)


@router.delete("/delete-all", response_model=DeleteAllResponse)
def delete_all(
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> DeleteAllResponse:
    """Elimina todas las notificaciones del destinatario."""

    deleted = delete_all_notifications_uc(db, recipient_id=current_recipient.id)
    return DeleteAllResponse(deleted_count=deleted)


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_recipient: Recipient = Depends(get_current_active_recipient),
) -> MessageResponse:
    """Elimina una notificación del destinatario."""

    try:
        delete_notification_uc(
            db, recipient_id=current_recipient.id, notification_id=notification_id
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL) from exc
    return MessageResponse(message="Notification deleted successfully")
