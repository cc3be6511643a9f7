"""Domain Events for the Position lifecycle."""

from dataclasses import dataclass
from decimal import Decimal

from emabot.domain.shared import DomainEvent


@dataclass(frozen=True)
class PositionOpenedEvent(DomainEvent):
    """Event: position opened and recorded by the store."""

    position_id: int
    symbol: str
    position_type: str  # "LONG" or "SHORT"
    entry_price: Decimal
    qty: int


@dataclass(frozen=True)
class PositionClosedEvent(DomainEvent):
    """Event: position closed, profit/loss realized."""

    position_id: int
    symbol: str
    position_type: str
    entry_price: Decimal
    exit_price: Decimal
    qty: int
    profit_loss: Decimal
