"""Ports for the Market Data bounded context."""

from .market_data_port import MarketDataPort

__all__ = ["MarketDataPort"]
