"""Exceptions for the Market Data bounded context."""

from .market_data_exceptions import (
    MalformedMarketDataError,
    MarketDataError,
    MarketDataTimeoutError,
    MarketDataUnavailableError,
)

__all__ = [
    "MarketDataError",
    "MarketDataTimeoutError",
    "MarketDataUnavailableError",
    "MalformedMarketDataError",
]
