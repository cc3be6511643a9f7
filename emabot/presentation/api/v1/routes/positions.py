"""Position API routes - read-only views over the position store.

Store failures surface as PositionStoreError and are answered with 503
by the application-wide exception handler.
"""

from typing import Annotated

from fastapi import APIRouter, Query

from emabot.application.trading.queries import (
    GetOpenPositionsQuery,
    GetOrderHistoryQuery,
    GetTotalPnlQuery,
)
from emabot.presentation.api.dependencies import (
    OpenPositionsHandlerDep,
    OrderHistoryHandlerDep,
    SettingsDep,
    TotalPnlHandlerDep,
)
from emabot.presentation.api.v1.schemas import (
    ErrorResponse,
    PnlTotalResponse,
    PositionResponse,
)

router = APIRouter(tags=["Positions"])

_STORE_ERRORS = {503: {"model": ErrorResponse, "description": "Position store unavailable"}}


@router.get(
    "/orders/history",
    response_model=list[PositionResponse],
    summary="Position history",
    description="All positions for the configured symbol, newest first.",
    responses=_STORE_ERRORS,
)
async def get_order_history(
    settings: SettingsDep,
    handler: OrderHistoryHandlerDep,
    limit: Annotated[int | None, Query(ge=1, description="Max rows (capped server-side)")] = None,
) -> list[PositionResponse]:
    limit = min(limit or settings.history_default_limit, settings.history_max_limit)
    positions = await handler.handle(GetOrderHistoryQuery(symbol=settings.symbol, limit=limit))
    return [PositionResponse.from_dto(p) for p in positions]


@router.get(
    "/pnl/total",
    response_model=PnlTotalResponse,
    summary="Realized PnL",
    description="Sum and count of profit_loss over CLOSED positions.",
    responses=_STORE_ERRORS,
)
async def get_total_pnl(settings: SettingsDep, handler: TotalPnlHandlerDep) -> PnlTotalResponse:
    summary = await handler.handle(GetTotalPnlQuery(symbol=settings.symbol))
    return PnlTotalResponse(total_pnl=summary.total, count=summary.count)


@router.get(
    "/positions/open",
    response_model=list[PositionResponse],
    summary="Open positions",
    description="OPEN positions for the configured symbol (at most one).",
    responses=_STORE_ERRORS,
)
async def get_open_positions(
    settings: SettingsDep, handler: OpenPositionsHandlerDep
) -> list[PositionResponse]:
    positions = await handler.handle(GetOpenPositionsQuery(symbol=settings.symbol))
    return [PositionResponse.from_dto(p) for p in positions]
