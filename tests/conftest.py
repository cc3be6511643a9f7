"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from emabot.domain.market_data import MarketDataPort
from emabot.domain.trading import MarketQuote

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeMarketData(MarketDataPort):
    """Returns ``closes`` (or raises ``error``) and records every request."""

    def __init__(self, closes=None) -> None:
        self.closes = [Decimal(str(c)) for c in (closes or [])]
        self.error: Exception | None = None
        self.calls: list[tuple[str, str, int]] = []
        self.closed = False

    def set_closes(self, closes) -> None:
        self.closes = [Decimal(str(c)) for c in closes]

    async def fetch_closes(self, symbol: str, interval: str, limit: int) -> list[Decimal]:
        self.calls.append((symbol, interval, limit))
        if self.error is not None:
            raise self.error
        return list(self.closes[-limit:])

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_market_data():
    """Scriptable price source."""
    return FakeMarketData()


@pytest.fixture
def make_quote():
    """Factory for MarketQuote; ``minutes`` offsets the quote time from T0."""

    def _make(price, ema_fast="10", ema_slow="10", minutes=0) -> MarketQuote:
        return MarketQuote(
            price=Decimal(str(price)),
            ema_fast=Decimal(str(ema_fast)),
            ema_slow=Decimal(str(ema_slow)),
            at=T0 + timedelta(minutes=minutes),
        )

    return _make
