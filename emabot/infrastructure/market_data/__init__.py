"""Market data adapters."""

from .binance_client import BinanceMarketDataClient
from .retry import retry_with_backoff

__all__ = ["BinanceMarketDataClient", "retry_with_backoff"]
