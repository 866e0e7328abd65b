"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, sessionmaker

from listing_alerts.domain.entities import Recipient
from listing_alerts.infrastructure.database import SessionLocal, get_db
from listing_alerts.infrastructure.push import PushDispatcher
from listing_alerts.infrastructure.repositories import RecipientRepository
from listing_alerts.infrastructure.security import (
    decode_access_token,
    internal_key_matches,
    recipient_id_from_claims,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Credenciales inválidas") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_recipient(token: str, db: Session) -> Recipient:
    """Resolve the recipient identified by the provided access token."""

    try:
        claims = decode_access_token(token)
        recipient_id = recipient_id_from_claims(claims)
    except ValueError as exc:
        raise _credentials_error() from exc

    recipient = RecipientRepository(db).get(recipient_id)
    if recipient is None:
        raise _credentials_error("Destinatario no encontrado")
    return recipient


def get_current_recipient(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Recipient:
    """Return the recipient authenticated by the bearer token."""

    return resolve_current_recipient(token, db)


def get_current_active_recipient(
    current_recipient: Recipient = Depends(get_current_recipient),
) -> Recipient:
    """Ensure the authenticated recipient is active."""

    if not current_recipient.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Destinatario inactivo",
        )
    return current_recipient


def require_internal_caller(
    x_internal_key: str | None = Header(default=None),
) -> None:
    """Allow only trusted services that present the internal API key."""

    if not internal_key_matches(x_internal_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )


def get_push_dispatcher(request: Request) -> PushDispatcher:
    """Return the dispatcher built for this process during startup."""

    dispatcher = getattr(request.app.state, "push_dispatcher", None)
    if dispatcher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Servicio de notificaciones push no inicializado",
        )
    return dispatcher


def get_session_factory() -> sessionmaker:
    """Return the session factory used by work that outlives the request session."""

    return SessionLocal
