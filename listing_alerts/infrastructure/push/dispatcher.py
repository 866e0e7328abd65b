"""Multicast push dispatch with per-token failure isolation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from listing_alerts.domain.entities import DispatchOutcome, DispatchReport
from listing_alerts.domain.errors import DispatchError

logger = logging.getLogger(__name__)

MAX_MULTICAST_TOKENS = 500
MAX_TOKEN_LENGTH = 4096

PlatformHints = Mapping[str, Mapping[str, Any]]

# Accepted hint keys per platform and the type each value must have.
_HINT_FIELDS: dict[str, dict[str, type]] = {
    "android": {"sound": str, "channel_id": str, "priority": str},
    "ios": {"sound": str, "badge": int},
    "web": {"icon": str},
}
_ANDROID_PRIORITIES = {"normal", "high"}


class PushTransport(Protocol):
    """Transport able to deliver one multicast message."""

    def send_multicast(
        self,
        tokens: list[str],
        *,
        title: str,
        body: str,
        platform_hints: PlatformHints,
    ) -> list[DispatchOutcome]:
        """Send to ``tokens`` and return one outcome per token.

        Must raise :class:`DispatchError` when the batch could not be handed
        to the provider at all.
        """


class UnconfiguredPushTransport:
    """Transport used when no push credentials are configured."""

    def send_multicast(
        self,
        tokens: list[str],
        *,
        title: str,
        body: str,
        platform_hints: PlatformHints,
    ) -> list[DispatchOutcome]:
        raise DispatchError("Push transport is not configured", attempted=len(tokens))


def normalize_tokens(tokens: Iterable[object]) -> list[str]:
    """Return the usable, de-duplicated tokens preserving first-seen order."""

    unique: list[str] = []
    seen: set[str] = set()
    for token in tokens or ():
        if not isinstance(token, str):
            continue
        candidate = token.strip()
        if not candidate or len(candidate) > MAX_TOKEN_LENGTH:
            continue
        if any(char.isspace() for char in candidate):
            continue
        if candidate in seen:
            continue
        seen.add(candidate)
        unique.append(candidate)
    return unique


def sanitize_platform_hints(platform_hints: PlatformHints | None) -> dict[str, dict[str, Any]]:
    """Drop malformed platform entries so they cannot affect other platforms."""

    sanitized: dict[str, dict[str, Any]] = {}
    for platform, hints in (platform_hints or {}).items():
        fields = _HINT_FIELDS.get(platform)
        if fields is None:
            logger.warning("Ignoring push hints for unsupported platform %r", platform)
            continue
        problem = _hint_problem(hints, fields)
        if problem is not None:
            logger.warning("Ignoring malformed %s push hints: %s", platform, problem)
            continue
        if hints:
            sanitized[platform] = dict(hints)
    return sanitized


def _hint_problem(hints: object, fields: dict[str, type]) -> str | None:
    if not isinstance(hints, Mapping):
        return "expected a mapping"
    for key, value in hints.items():
        expected = fields.get(key)
        if expected is None:
            return f"unknown key {key!r}"
        if expected is int:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return f"{key} must be a non-negative integer"
        elif not isinstance(value, expected) or not value.strip():
            return f"{key} must be a non-empty string"
        if key == "priority" and value not in _ANDROID_PRIORITIES:
            return f"priority must be one of {sorted(_ANDROID_PRIORITIES)}"
    return None


class PushDispatcher:
    """Fan a single alert out to many device tokens."""

    def __init__(
        self, transport: PushTransport, *, batch_size: int = MAX_MULTICAST_TOKENS
    ) -> None:
        if batch_size < 1 or batch_size > MAX_MULTICAST_TOKENS:
            raise ValueError(f"batch_size must be between 1 and {MAX_MULTICAST_TOKENS}")
        self._transport = transport
        self._batch_size = batch_size

    @property
    def transport(self) -> PushTransport:
        return self._transport

    def dispatch(
        self,
        tokens: Iterable[object],
        title: str,
        body: str,
        platform_hints: PlatformHints | None = None,
    ) -> DispatchReport:
        """Send ``title``/``body`` to ``tokens`` and report per-token outcomes.

        Nothing is sent when no usable token remains after normalisation. A
        :class:`DispatchError` is raised only when every batch failed at the
        transport level; individual token failures are reported as outcomes.
        """

        unique_tokens = normalize_tokens(tokens)
        report = DispatchReport()
        if not unique_tokens:
            logger.debug("No deliverable push tokens; skipping transport call")
            return report

        hints = sanitize_platform_hints(platform_hints)
        batches = [
            unique_tokens[start : start + self._batch_size]
            for start in range(0, len(unique_tokens), self._batch_size)
        ]
        transport_failures: list[DispatchError] = []
        for batch in batches:
            try:
                outcomes = self._transport.send_multicast(
                    batch, title=title, body=body, platform_hints=hints
                )
            except DispatchError as exc:
                logger.warning(
                    "Push batch of %s tokens failed at the transport: %s", len(batch), exc
                )
                transport_failures.append(exc)
                report.outcomes.extend(
                    DispatchOutcome(token=token, success=False, error=str(exc))
                    for token in batch
                )
                continue
            report.outcomes.extend(_align_outcomes(batch, outcomes))

        if len(transport_failures) == len(batches):
            raise DispatchError(
                f"Push transport unavailable: {transport_failures[-1]}",
                attempted=len(unique_tokens),
            ) from transport_failures[-1]

        if report.failed:
            logger.info(
                "Push dispatch finished with %s/%s tokens delivered",
                report.succeeded,
                report.attempted,
            )
        return report


def _align_outcomes(batch: list[str], outcomes: list[DispatchOutcome]) -> list[DispatchOutcome]:
    """Return exactly one outcome per token in ``batch``."""

    by_token = {outcome.token: outcome for outcome in outcomes}
    aligned: list[DispatchOutcome] = []
    for token in batch:
        outcome = by_token.get(token)
        if outcome is None:
            outcome = DispatchOutcome(token=token, success=False, error="No response from transport")
        aligned.append(outcome)
    return aligned


__all__ = [
    "MAX_MULTICAST_TOKENS",
    "PlatformHints",
    "PushDispatcher",
    "PushTransport",
    "UnconfiguredPushTransport",
    "normalize_tokens",
    "sanitize_platform_hints",
]
