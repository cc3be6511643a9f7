"""Trading handlers."""

from .query_handlers import GetOpenPositionsHandler, GetOrderHistoryHandler, GetTotalPnlHandler
from .tick_engine import TickEngine

__all__ = [
    "TickEngine",
    "GetOrderHistoryHandler",
    "GetOpenPositionsHandler",
    "GetTotalPnlHandler",
]
