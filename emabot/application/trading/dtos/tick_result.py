"""Outcome of one Tick Engine run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from emabot.domain.trading import CrossSignal, MarketSnapshot, TransitionAction


class TickOutcome(str, Enum):
    COMPLETED = "COMPLETED"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    FETCH_FAILED = "FETCH_FAILED"
    FAILED = "FAILED"
    """Hard error during the cycle (e.g. store write failure on open)."""


@dataclass
class TickResult:
    """What a tick did.

    ``snapshot`` is the snapshot written by this tick, None when the cycle
    aborted before computing a signal.
    """

    outcome: TickOutcome
    signal: Optional[CrossSignal] = None
    snapshot: Optional[MarketSnapshot] = None
    actions: list[TransitionAction] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == TickOutcome.COMPLETED
