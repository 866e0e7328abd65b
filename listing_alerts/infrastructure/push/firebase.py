"""Firebase Cloud Messaging transport for push alerts."""

from __future__ import annotations

import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError

from listing_alerts.config import Settings
from listing_alerts.domain.entities import DispatchOutcome
from listing_alerts.domain.errors import DispatchError

from .dispatcher import PlatformHints, PushDispatcher, UnconfiguredPushTransport

logger = logging.getLogger(__name__)

_TOKEN_URI = "https://oauth2.googleapis.com/token"


def describe_firebase_error(exc: BaseException | None) -> str:
    """Return a short human readable description for a Firebase failure."""

    if exc is None:
        return "Unknown delivery failure"

    code = getattr(exc, "code", None)
    message = str(exc).strip() or exc.__class__.__name__
    if code:
        return f"{code}: {message}"
    return message


def build_multicast_message(
    tokens: list[str],
    *,
    title: str,
    body: str,
    platform_hints: PlatformHints,
) -> messaging.MulticastMessage:
    """Build the FCM multicast message including per-platform delivery hints."""

    android = _android_config(platform_hints.get("android"))
    apns = _apns_config(platform_hints.get("ios"))
    webpush = _webpush_config(platform_hints.get("web"))
    return messaging.MulticastMessage(
        tokens=list(tokens),
        notification=messaging.Notification(title=title, body=body),
        android=android,
        apns=apns,
        webpush=webpush,
    )


def _android_config(hints: dict[str, Any] | None) -> messaging.AndroidConfig | None:
    if not hints:
        return None
    notification = None
    if hints.get("sound") or hints.get("channel_id"):
        notification = messaging.AndroidNotification(
            sound=hints.get("sound"), channel_id=hints.get("channel_id")
        )
    return messaging.AndroidConfig(priority=hints.get("priority"), notification=notification)


def _apns_config(hints: dict[str, Any] | None) -> messaging.APNSConfig | None:
    if not hints:
        return None
    aps = messaging.Aps(sound=hints.get("sound"), badge=hints.get("badge"))
    return messaging.APNSConfig(payload=messaging.APNSPayload(aps=aps))


def _webpush_config(hints: dict[str, Any] | None) -> messaging.WebpushConfig | None:
    if not hints:
        return None
    return messaging.WebpushConfig(
        notification=messaging.WebpushNotification(icon=hints.get("icon"))
    )


class FirebasePushTransport:
    """Deliver multicast messages through an explicitly initialised Firebase app."""

    def __init__(self, app: firebase_admin.App | None) -> None:
        self._app = app

    def send_multicast(
        self,
        tokens: list[str],
        *,
        title: str,
        body: str,
        platform_hints: PlatformHints,
    ) -> list[DispatchOutcome]:
        message = build_multicast_message(
            tokens, title=title, body=body, platform_hints=platform_hints
        )
        try:
            response = messaging.send_each_for_multicast(message, app=self._app)
        except (FirebaseError, GoogleAuthError) as exc:
            logger.error("Firebase multicast request failed: %s", describe_firebase_error(exc))
            raise DispatchError(describe_firebase_error(exc), attempted=len(tokens)) from exc

        outcomes = [
            DispatchOutcome(
                token=token,
                success=bool(result.success),
                error=None if result.success else describe_firebase_error(result.exception),
            )
            for token, result in zip(tokens, response.responses)
        ]
        if response.failure_count:
            logger.warning(
                "Firebase rejected %s of %s push tokens",
                response.failure_count,
                len(tokens),
            )
        return outcomes


def build_firebase_app(settings: Settings) -> firebase_admin.App | None:
    """Return the named Firebase app for ``settings`` or ``None`` when unconfigured."""

    if not settings.push_enabled:
        return None

    try:
        return firebase_admin.get_app(settings.firebase_app_name)
    except ValueError:
        pass

    credential = credentials.Certificate(
        {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "client_email": settings.firebase_client_email,
            "private_key": settings.firebase_private_key,
            "token_uri": _TOKEN_URI,
        }
    )
    return firebase_admin.initialize_app(
        credential,
        {"projectId": settings.firebase_project_id},
        name=settings.firebase_app_name,
    )


def build_push_dispatcher(settings: Settings) -> PushDispatcher:
    """Create the process-wide dispatcher for the configured transport."""

    app = build_firebase_app(settings)
    if app is None:
        logger.info("Firebase credentials not configured; push delivery disabled")
        return PushDispatcher(UnconfiguredPushTransport())
    return PushDispatcher(FirebasePushTransport(app))


__all__ = [
    "FirebasePushTransport",
    "build_firebase_app",
    "build_multicast_message",
    "build_push_dispatcher",
    "describe_firebase_error",
]
