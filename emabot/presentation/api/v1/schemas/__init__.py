"""Pydantic schemas for API v1."""

from .bot_schemas import (
    ErrorResponse,
    HealthResponse,
    OpenPositionSummary,
    PriceResponse,
    TickResponse,
)
from .position_schemas import PnlTotalResponse, PositionResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "OpenPositionSummary",
    "PriceResponse",
    "TickResponse",
    "PositionResponse",
    "PnlTotalResponse",
]
