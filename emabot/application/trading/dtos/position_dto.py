"""Position DTO - data transfer object for API responses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from emabot.domain.trading.entities import Position


@dataclass
class PositionDTO:
    """Position data transfer object."""

    id: int
    symbol: str
    status: str
    position_type: str
    qty: int
    entry_price: Decimal
    entry_time: datetime
    entry_ema_fast: Decimal
    entry_ema_slow: Decimal
    exit_price: Decimal | None
    exit_time: datetime | None
    exit_ema_fast: Decimal | None
    exit_ema_slow: Decimal | None
    profit_loss: Decimal | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, position: Position) -> "PositionDTO":
        return cls(
            id=position.id or 0,
            symbol=position.symbol,
            status=position.status.value,
            position_type=position.position_type.value,
            qty=position.qty,
            entry_price=position.entry_price,
            entry_time=position.entry_time,
            entry_ema_fast=position.entry_ema_fast,
            entry_ema_slow=position.entry_ema_slow,
            exit_price=position.exit_price,
            exit_time=position.exit_time,
            exit_ema_fast=position.exit_ema_fast,
            exit_ema_slow=position.exit_ema_slow,
            profit_loss=position.profit_loss,
            created_at=position.created_at,
            updated_at=position.updated_at,
        )
