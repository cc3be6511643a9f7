"""Trading queries."""

from .position_queries import GetOpenPositionsQuery, GetOrderHistoryQuery, GetTotalPnlQuery

__all__ = [
    "GetOrderHistoryQuery",
    "GetOpenPositionsQuery",
    "GetTotalPnlQuery",
]
