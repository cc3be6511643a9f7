"""Read-side queries over stored positions."""

from dataclasses import dataclass

from emabot.application.shared import Query


@dataclass(frozen=True)
class GetOrderHistoryQuery(Query):
    """All positions for the symbol, newest first."""

    symbol: str
    limit: int = 100


@dataclass(frozen=True)
class GetOpenPositionsQuery(Query):
    """OPEN positions for the symbol (expected at most one)."""

    symbol: str


@dataclass(frozen=True)
class GetTotalPnlQuery(Query):
    """Sum and count of realized PnL over CLOSED positions."""

    symbol: str
