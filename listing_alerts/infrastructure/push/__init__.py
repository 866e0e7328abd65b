"""Push delivery helpers for the infrastructure layer."""

from .dispatcher import (
    MAX_MULTICAST_TOKENS,
    PlatformHints,
    PushDispatcher,
    PushTransport,
    UnconfiguredPushTransport,
    normalize_tokens,
    sanitize_platform_hints,
)
from .firebase import (
    FirebasePushTransport,
    build_firebase_app,
    build_multicast_message,
    build_push_dispatcher,
    describe_firebase_error,
)

__all__ = [
    "MAX_MULTICAST_TOKENS",
    "PlatformHints",
    "PushDispatcher",
    "PushTransport",
    "UnconfiguredPushTransport",
    "normalize_tokens",
    "sanitize_platform_hints",
    "FirebasePushTransport",
    "build_firebase_app",
    "build_multicast_message",
    "build_push_dispatcher",
    "describe_firebase_error",
]
