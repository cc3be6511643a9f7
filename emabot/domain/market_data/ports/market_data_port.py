"""MarketDataPort - abstract interface for the candle price source.

Domain defines WHAT is needed (this interface); infrastructure adapters
define HOW (HTTP client for a specific provider).
"""

from abc import ABC, abstractmethod
from decimal import Decimal


class MarketDataPort(ABC):
    """Abstract interface for fetching recent closing prices.

    Example:
        >>> closes = await market_data.fetch_closes("BTCUSDT", "1m", limit=250)
        >>> closes[-1]  # most recent close
        Decimal('64012.55')
    """

    @abstractmethod
    async def fetch_closes(self, symbol: str, interval: str, limit: int) -> list[Decimal]:
        """Get the most recent ``limit`` closing prices, oldest first.

        Raises:
            MarketDataTimeoutError: Request timed out.
            MarketDataUnavailableError: Transport or provider failure.
            MalformedMarketDataError: Response could not be parsed.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        pass
