"""Binance klines adapter for MarketDataPort.

GET /api/v3/klines?symbol=BTCUSDT&interval=1m&limit=250 returns rows of
[open_time, open, high, low, close, volume, ...], oldest first. Prices are
JSON strings and are parsed to Decimal without a float round trip.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from emabot.config import get_logger
from emabot.domain.market_data import (
    MalformedMarketDataError,
    MarketDataPort,
    MarketDataTimeoutError,
    MarketDataUnavailableError,
)

from .retry import retry_with_backoff

logger = get_logger(__name__)

KLINES_PATH = "/api/v3/klines"
CLOSE_INDEX = 4


class BinanceMarketDataClient(MarketDataPort):
    """Fetches closing prices from the public Binance REST API.

    Example:
        >>> client = BinanceMarketDataClient(timeout=12.0)
        >>> closes = await client.fetch_closes("BTCUSDT", "1m", limit=250)
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: str = "https://api.binance.com",
        timeout: float = 12.0,
        max_retries: int = 1,
        retry_base_delay: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: REST API root.
            timeout: Per-request timeout in seconds.
            max_retries: Retries for timeouts, transport errors, 429 and 5xx.
            retry_base_delay: First backoff delay in seconds.
            client: Preconfigured httpx client (tests pass a MockTransport).
        """
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._fetch_with_retry = retry_with_backoff(
            max_retries=max_retries,
            base_delay=retry_base_delay,
        )(self._fetch_once)

    async def fetch_closes(self, symbol: str, interval: str, limit: int) -> list[Decimal]:
        return await self._fetch_with_retry(symbol, interval, limit)

    async def _fetch_once(self, symbol: str, interval: str, limit: int) -> list[Decimal]:
        params = {"symbol": symbol, "interval": interval, "limit": limit}
        try:
            response = await self._client.get(KLINES_PATH, params=params)
        except httpx.TimeoutException as e:
            raise MarketDataTimeoutError(
                "Price source timed out", symbol=symbol, interval=interval
            ) from e
        except httpx.TransportError as e:
            raise MarketDataUnavailableError(
                "Price source unreachable", symbol=symbol, error=str(e)
            ) from e

        if response.status_code == 429 or response.status_code >= 500:
            raise MarketDataUnavailableError(
                "Price source unavailable",
                symbol=symbol,
                status_code=response.status_code,
            )
        if response.status_code != 200:
            raise MalformedMarketDataError(
                "Price source rejected the request",
                symbol=symbol,
                status_code=response.status_code,
                body=response.text[:200],
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedMarketDataError("Response is not JSON", symbol=symbol) from e

        closes = self._parse_closes(payload, symbol)
        logger.debug(
            "market_data.fetched",
            symbol=symbol,
            interval=interval,
            candles=len(closes),
        )
        return closes

    @staticmethod
    def _parse_closes(payload: Any, symbol: str) -> list[Decimal]:
        if not isinstance(payload, list):
            raise MalformedMarketDataError("Expected a list of candles", symbol=symbol)

        closes = []
        for row in payload:
            try:
                close = Decimal(str(row[CLOSE_INDEX]))
            except (TypeError, IndexError, KeyError, InvalidOperation) as e:
                raise MalformedMarketDataError(
                    "Candle row has no valid close", symbol=symbol, row=str(row)[:100]
                ) from e
            if not close.is_finite() or close <= 0:
                raise MalformedMarketDataError(
                    "Candle close must be a positive number",
                    symbol=symbol,
                    close=str(close),
                )
            closes.append(close)
        return closes

    async def close(self) -> None:
        await self._client.aclose()
