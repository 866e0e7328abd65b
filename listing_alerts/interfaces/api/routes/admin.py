"""Administrative read access to any recipient's notification feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from listing_alerts.application.use_cases.notifications import (
    list_notifications as list_notifications_uc,
)
from listing_alerts.infrastructure.database import get_db
from listing_alerts.infrastructure.repositories import RecipientRepository
from listing_alerts.interfaces.api.dependencies import require_internal_caller
from listing_alerts.interfaces.api.schemas import NotificationPageRead
from listing_alerts.utils.pagination import ADMIN_PAGE_SIZE

from .notifications import page_to_schema

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_internal_caller)],
)


@router.get(
    "/recipients/{recipient_id}/notifications",
    response_model=NotificationPageRead,
)
def list_recipient_notifications(
    recipient_id: int,
    page: int = Query(1),
    page_size: int = Query(ADMIN_PAGE_SIZE, alias="pageSize"),
    db: Session = Depends(get_db),
) -> NotificationPageRead:
    """Devuelve las notificaciones de cualquier destinatario para soporte."""

    if RecipientRepository(db).get(recipient_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Destinatario no encontrado"
        )
    result = list_notifications_uc(
        db,
        recipient_id=recipient_id,
        page=page,
        page_size=page_size,
        default_page_size=ADMIN_PAGE_SIZE,
    )
    return page_to_schema(result)
