"""Value objects for the Trading bounded context."""

from .enums import CrossSignal, PositionStatus, PositionType, TradingState
from .market import ExitDetails, MarketQuote, MarketSnapshot, PnlSummary

__all__ = [
    "CrossSignal",
    "PositionStatus",
    "PositionType",
    "TradingState",
    "ExitDetails",
    "MarketQuote",
    "MarketSnapshot",
    "PnlSummary",
]
