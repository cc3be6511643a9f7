"""Market Data Bounded Context - Domain Layer.

Exports:
    Ports: MarketDataPort
    Exceptions: MarketDataError and its subclasses
"""

from .exceptions import (
    MalformedMarketDataError,
    MarketDataError,
    MarketDataTimeoutError,
    MarketDataUnavailableError,
)
from .ports import MarketDataPort

__all__ = [
    "MarketDataPort",
    "MarketDataError",
    "MarketDataTimeoutError",
    "MarketDataUnavailableError",
    "MalformedMarketDataError",
]
