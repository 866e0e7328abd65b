"""Endpoint that turns a newly created listing into recipient alerts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import sessionmaker

from listing_alerts.application.use_cases.listings import notify_listing_created
from listing_alerts.domain.entities import ListingContext
from listing_alerts.domain.errors import ValidationError
from listing_alerts.infrastructure.push import PushDispatcher
from listing_alerts.interfaces.api.dependencies import (
    get_push_dispatcher,
    get_session_factory,
    require_internal_caller,
)
from listing_alerts.interfaces.api.schemas import (
    ListingCreatedRequest,
    ListingNotificationRead,
)

router = APIRouter(
    prefix="/listings",
    tags=["listings"],
    dependencies=[Depends(require_internal_caller)],
)


@router.post("/notifications", response_model=ListingNotificationRead)
async def notify_listing(
    listing_in: ListingCreatedRequest,
    session_factory: sessionmaker = Depends(get_session_factory),
    dispatcher: PushDispatcher = Depends(get_push_dispatcher),
) -> ListingNotificationRead:
    """Avisa a los destinatarios sobre un anuncio recién creado.

    Los conteos se devuelven incluso si el envío push o el guardado fallan.
    """

    listing = ListingContext(
        id=listing_in.id,
        make=listing_in.make,
        model=listing_in.model,
        attributes=listing_in.extra_attributes(),
    )
    try:
        summary = await notify_listing_created(
            listing,
            session_factory=session_factory,
            dispatcher=dispatcher,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return ListingNotificationRead(
        notifications_sent=summary.notifications_sent,
        notifications_saved=summary.notifications_saved,
    )
