"""Pydantic schemas for stored positions."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from emabot.application.trading.dtos import PositionDTO


class PositionResponse(BaseModel):
    """Stored position. Exit fields are null while the position is OPEN."""

    id: int
    symbol: str
    status: str = Field(..., description="OPEN or CLOSED")
    position_type: str = Field(..., description="LONG or SHORT")
    qty: int
    entry_price: Decimal
    entry_time: datetime
    entry_ema_fast: Decimal
    entry_ema_slow: Decimal
    exit_price: Decimal | None = None
    exit_time: datetime | None = None
    exit_ema_fast: Decimal | None = None
    exit_ema_slow: Decimal | None = None
    profit_loss: Decimal | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_dto(cls, dto: PositionDTO) -> "PositionResponse":
        return cls(**vars(dto))


class PnlTotalResponse(BaseModel):
    """Realized PnL over CLOSED positions.

    Example:
        {"total_pnl": "-3.0000", "count": 1}
    """

    total_pnl: Decimal = Field(..., description="Sum of profit_loss, 4 decimal places")
    count: int = Field(..., ge=0)

    model_config = {"json_schema_extra": {"example": {"total_pnl": "-3.0000", "count": 1}}}
