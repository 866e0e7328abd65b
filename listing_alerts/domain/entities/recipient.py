"""Domain entity describing a notification recipient."""

from __future__ import annotations

from dataclasses import dataclass, field

PLATFORM_ANDROID = "android"
PLATFORM_IOS = "ios"
PLATFORM_WEB = "web"
SUPPORTED_PLATFORMS = (PLATFORM_ANDROID, PLATFORM_IOS, PLATFORM_WEB)


@dataclass
class Recipient:
    """Directory entry for someone eligible to receive listing alerts."""

    id: int
    name: str | None = None
    platform: str | None = None
    is_active: bool = True
    device_tokens: list[str] = field(default_factory=list)

    def has_device_token(self) -> bool:
        """Return ``True`` when at least one non-blank token is registered."""

        return any(token and token.strip() for token in self.device_tokens)


__all__ = [
    "PLATFORM_ANDROID",
    "PLATFORM_IOS",
    "PLATFORM_WEB",
    "Recipient",
    "SUPPORTED_PLATFORMS",
]
