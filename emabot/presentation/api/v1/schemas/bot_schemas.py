"""Pydantic schemas for bot status, price and tick responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema.

    Example:
        {
            "error": "StoreUnavailable",
            "message": "Position store failed during list_by_symbol"
        }
    """

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: list | dict | None = Field(default=None, description="Additional error details")


class OpenPositionSummary(BaseModel):
    position_type: str = Field(..., description="LONG or SHORT")
    entry_price: Decimal
    entry_time: datetime


class HealthResponse(BaseModel):
    """Bot configuration and liveness of its dependencies.

    Example:
        {
            "ok": true,
            "symbol": "BTCUSDT",
            "interval": "1m",
            "ema_fast": 20,
            "ema_slow": 200,
            "dry_run": false,
            "db": "btcbotema",
            "position": {"position_type": "LONG", "entry_price": "64000.1", ...},
            "last_tick_at": "2024-05-01T12:01:00Z"
        }
    """

    ok: bool = True
    symbol: str
    interval: str
    ema_fast: int
    ema_slow: int
    dry_run: bool
    db: str = Field(..., description="SKIPPED in dry-run, database name, or DISCONNECTED")
    position: OpenPositionSummary | None = None
    last_tick_at: datetime | None = None


class PriceResponse(BaseModel):
    """Latest snapshot. Values are null until the first tick computed a signal."""

    symbol: str
    interval: str
    ema_fast: int = Field(..., description="Fast EMA period")
    ema_slow: int = Field(..., description="Slow EMA period")
    price: Decimal | None = None
    ema_fast_value: Decimal | None = None
    ema_slow_value: Decimal | None = None
    signal: str | None = Field(default=None, description="GOLDEN, DEATH or NONE")
    position_open: bool
    position_type: str | None = None
    last_tick_at: datetime | None = None


class TickResponse(BaseModel):
    """Result of a manual tick.

    ``skipped`` is true when another tick was in flight and the request was
    dropped.
    """

    ok: bool
    skipped: bool = False
    outcome: str | None = None
    signal: str | None = None
    actions: list[str] = Field(default_factory=list)
    error: str | None = None
    last_tick_at: datetime | None = None
