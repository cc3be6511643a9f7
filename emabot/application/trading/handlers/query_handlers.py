"""Query handlers for the read-only surface."""

from decimal import Decimal

from emabot.application.shared import QueryHandler, UnitOfWork
from emabot.application.trading.dtos import PositionDTO
from emabot.application.trading.queries import (
    GetOpenPositionsQuery,
    GetOrderHistoryQuery,
    GetTotalPnlQuery,
)
from emabot.domain.trading import PnlSummary


class GetOrderHistoryHandler(QueryHandler[GetOrderHistoryQuery, list[PositionDTO]]):
    """Positions for the symbol, newest first."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetOrderHistoryQuery) -> list[PositionDTO]:
        async with self.uow:
            positions = await self.uow.positions.list_by_symbol(query.symbol, query.limit)
        return [PositionDTO.from_entity(p) for p in positions]


class GetOpenPositionsHandler(QueryHandler[GetOpenPositionsQuery, list[PositionDTO]]):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetOpenPositionsQuery) -> list[PositionDTO]:
        async with self.uow:
            positions = await self.uow.positions.list_open(query.symbol)
        return [PositionDTO.from_entity(p) for p in positions]


class GetTotalPnlHandler(QueryHandler[GetTotalPnlQuery, PnlSummary]):
    """Realized PnL, total rounded to 4 decimal places."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetTotalPnlQuery) -> PnlSummary:
        async with self.uow:
            summary = await self.uow.positions.sum_closed_pnl(query.symbol)
        return PnlSummary(
            total=summary.total.quantize(Decimal("0.0001")),
            count=summary.count,
        )
