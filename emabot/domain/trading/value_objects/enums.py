"""Enums for the Trading bounded context."""

from enum import Enum


class PositionStatus(str, Enum):
    """Position lifecycle status.

    State machine:
        OPEN -> CLOSED (exactly once, never reopened, never deleted)
    """

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class PositionType(str, Enum):
    """Position direction."""

    LONG = "LONG"
    """Profits when price rises."""

    SHORT = "SHORT"
    """Profits when price falls."""

    @property
    def opposite(self) -> "PositionType":
        return PositionType.SHORT if self is PositionType.LONG else PositionType.LONG


class CrossSignal(str, Enum):
    """Crossover between the fast and the slow EMA."""

    GOLDEN = "GOLDEN"
    """Fast EMA crossed above the slow EMA."""

    DEATH = "DEATH"
    """Fast EMA crossed below the slow EMA."""

    NONE = "NONE"


class TradingState(str, Enum):
    """State of the single-position state machine."""

    FLAT = "FLAT"
    LONG = "LONG"
    SHORT = "SHORT"

    @classmethod
    def of(cls, position_type: PositionType | None) -> "TradingState":
        """State implied by the open position's type (None means FLAT)."""
        if position_type is None:
            return cls.FLAT
        return cls(position_type.value)
