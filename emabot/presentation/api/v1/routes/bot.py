"""Bot API routes - health, latest price snapshot and manual tick."""

from datetime import datetime, timezone

from fastapi import APIRouter

from emabot.application.trading.commands import TickTrigger
from emabot.config import get_logger
from emabot.presentation.api.dependencies import (
    SettingsDep,
    SnapshotCacheDep,
    StateMachineDep,
    TickSchedulerDep,
    UnitOfWorkDep,
)
from emabot.presentation.api.v1.schemas import (
    HealthResponse,
    OpenPositionSummary,
    PriceResponse,
    TickResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["Bot"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Bot health",
    description="Configuration, store connectivity, open position and last tick time.",
)
async def bot_health(
    settings: SettingsDep,
    uow: UnitOfWorkDep,
    state_machine: StateMachineDep,
    cache: SnapshotCacheDep,
) -> HealthResponse:
    if settings.dry_run:
        db = "SKIPPED"
    else:
        db = settings.db_name if await uow.ping() else "DISCONNECTED"

    position = state_machine.open_position
    return HealthResponse(
        symbol=settings.symbol,
        interval=settings.interval,
        ema_fast=settings.ema_fast,
        ema_slow=settings.ema_slow,
        dry_run=settings.dry_run,
        db=db,
        position=(
            OpenPositionSummary(
                position_type=position.position_type.value,
                entry_price=position.entry_price,
                entry_time=position.entry_time,
            )
            if position
            else None
        ),
        last_tick_at=cache.last_tick_at,
    )


@router.get(
    "/price",
    response_model=PriceResponse,
    summary="Latest price and EMAs",
    description="""
    Latest computed snapshot and position state.

    If the snapshot is missing or older than the staleness threshold, a tick
    is requested first. When another tick is in flight the request does not
    wait for it and the most recent snapshot is returned.
    """,
)
async def get_price(
    settings: SettingsDep,
    state_machine: StateMachineDep,
    cache: SnapshotCacheDep,
    scheduler: TickSchedulerDep,
) -> PriceResponse:
    now = datetime.now(timezone.utc)
    if cache.is_stale(now, settings.snapshot_stale_after_seconds):
        logger.info("api.price.stale_snapshot", last_tick_at=cache.last_tick_at)
        await scheduler.request_tick(TickTrigger.STALE_READ)

    snapshot = cache.current
    position = state_machine.open_position
    return PriceResponse(
        symbol=settings.symbol,
        interval=settings.interval,
        ema_fast=settings.ema_fast,
        ema_slow=settings.ema_slow,
        price=snapshot.price if snapshot else None,
        ema_fast_value=snapshot.ema_fast if snapshot else None,
        ema_slow_value=snapshot.ema_slow if snapshot else None,
        signal=snapshot.signal.value if snapshot else None,
        position_open=position is not None,
        position_type=position.position_type.value if position else None,
        last_tick_at=cache.last_tick_at,
    )


@router.post(
    "/tick",
    response_model=TickResponse,
    summary="Run a tick now",
    description="Administrative trigger. Goes through the same guard as the timer.",
)
async def run_tick(scheduler: TickSchedulerDep, cache: SnapshotCacheDep) -> TickResponse:
    result = await scheduler.request_tick(TickTrigger.MANUAL)

    if result is None:
        return TickResponse(ok=False, skipped=True, last_tick_at=cache.last_tick_at)

    return TickResponse(
        ok=result.ok,
        outcome=result.outcome.value,
        signal=result.signal.value if result.signal else None,
        actions=[str(a) for a in result.actions],
        error=result.error,
        last_tick_at=cache.last_tick_at,
    )
