"""Access token helpers shared with the identity provider."""

from datetime import datetime, timedelta, timezone
import hmac

from jose import JWTError, jwt

from listing_alerts.config import get_settings

DEFAULT_TOKEN_LIFETIME = timedelta(minutes=30)


def create_access_token(recipient_id: int, expires_delta: timedelta | None = None) -> str:
    """Issue a token for ``recipient_id`` the way the identity provider does."""

    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    return jwt.encode(
        {"sub": str(recipient_id), "exp": expire},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def recipient_id_from_claims(claims: dict) -> int:
    """Return the recipient id carried in the ``sub`` claim."""

    subject = claims.get("sub")
    try:
        recipient_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise ValueError("Token subject is not a recipient id") from exc
    if recipient_id <= 0:
        raise ValueError("Token subject is not a recipient id")
    return recipient_id


def internal_key_matches(provided: str | None) -> bool:
    """Compare ``provided`` with the configured internal API key in constant time."""

    if not provided:
        return False
    expected = get_settings().internal_api_key
    return hmac.compare_digest(provided.encode(), expected.encode())
