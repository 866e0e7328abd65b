"""Ephemeral results of a push dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DispatchOutcome:
    """Delivery result for a single device token."""

    token: str
    success: bool
    error: str | None = None


@dataclass
class DispatchReport:
    """Per-token outcomes of one dispatch call."""

    outcomes: list[DispatchOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    def failed_tokens(self) -> list[str]:
        return [outcome.token for outcome in self.outcomes if not outcome.success]


__all__ = ["DispatchOutcome", "DispatchReport"]
