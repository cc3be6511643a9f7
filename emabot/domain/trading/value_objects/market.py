"""Value objects describing market observations and position outcomes."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from emabot.domain.shared import ValueObject, validate_value_object

from .enums import CrossSignal


@dataclass(frozen=True)
class MarketQuote(ValueObject):
    """Price and EMA values observed by one tick.

    Used as the entry snapshot on open and the exit snapshot on close.
    """

    price: Decimal
    ema_fast: Decimal
    ema_slow: Decimal
    at: datetime

    def __post_init__(self) -> None:
        validate_value_object(self.price > 0, "price must be positive")


@dataclass(frozen=True)
class ExitDetails(ValueObject):
    """Fields set exactly once when a position is closed."""

    exit_price: Decimal
    exit_time: datetime
    exit_ema_fast: Decimal
    exit_ema_slow: Decimal
    profit_loss: Decimal


@dataclass(frozen=True)
class MarketSnapshot(ValueObject):
    """Last computed view of the market, kept in process memory only."""

    price: Decimal
    ema_fast: Decimal
    ema_slow: Decimal
    signal: CrossSignal
    tick_at: datetime


@dataclass(frozen=True)
class PnlSummary(ValueObject):
    """Realized PnL over CLOSED positions."""

    total: Decimal
    count: int

    def __post_init__(self) -> None:
        validate_value_object(self.count >= 0, "count must be non-negative")
