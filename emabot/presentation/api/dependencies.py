"""Dependency injection for FastAPI.

Provides dependencies for API routes:
- Settings
- Unit of Work (SQL or in-memory, per request)
- Query handlers
- Position state machine, snapshot cache and tick scheduler
"""

from typing import Annotated, Callable

from fastapi import Depends

from emabot.application.shared import UnitOfWork
from emabot.application.trading.handlers import (
    GetOpenPositionsHandler,
    GetOrderHistoryHandler,
    GetTotalPnlHandler,
)
from emabot.application.trading.position_state_machine import PositionStateMachine
from emabot.application.trading.snapshot_cache import SnapshotCache
from emabot.config import Settings
from emabot.presentation.workers import TickScheduler

# ============================================================================
# GLOBAL DEPENDENCIES (initialized in the lifespan, see main.py)
# ============================================================================

_settings: Settings | None = None
_uow_factory: Callable[[], UnitOfWork] | None = None
_state_machine: PositionStateMachine | None = None
_snapshot_cache: SnapshotCache | None = None
_scheduler: TickScheduler | None = None


def init_dependencies(
    settings: Settings,
    uow_factory: Callable[[], UnitOfWork],
    state_machine: PositionStateMachine,
    snapshot_cache: SnapshotCache,
    scheduler: TickScheduler,
) -> None:
    """Initialize global dependencies.

    Args:
        settings: Application settings.
        uow_factory: Returns a fresh Unit of Work per call.
        state_machine: Owner of the in-memory open position.
        snapshot_cache: Last computed market snapshot.
        scheduler: Guarded tick entry point.
    """
    global _settings, _uow_factory, _state_machine, _snapshot_cache, _scheduler
    _settings = settings
    _uow_factory = uow_factory
    _state_machine = state_machine
    _snapshot_cache = snapshot_cache
    _scheduler = scheduler


def _require(value, name: str):
    if value is None:
        raise RuntimeError(
            f"Dependency '{name}' not initialized. Call init_dependencies() first."
        )
    return value


async def get_app_settings() -> Settings:
    return _require(_settings, "settings")


async def get_unit_of_work() -> UnitOfWork:
    """New Unit of Work for each request."""
    return _require(_uow_factory, "uow_factory")()


async def get_state_machine() -> PositionStateMachine:
    return _require(_state_machine, "state_machine")


async def get_snapshot_cache() -> SnapshotCache:
    return _require(_snapshot_cache, "snapshot_cache")


async def get_tick_scheduler() -> TickScheduler:
    return _require(_scheduler, "scheduler")


# ============================================================================
# HANDLERS
# ============================================================================


async def get_order_history_handler(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
) -> GetOrderHistoryHandler:
    return GetOrderHistoryHandler(uow)


async def get_open_positions_handler(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
) -> GetOpenPositionsHandler:
    return GetOpenPositionsHandler(uow)


async def get_total_pnl_handler(
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
) -> GetTotalPnlHandler:
    return GetTotalPnlHandler(uow)


# ============================================================================
# TYPE ALIASES (for cleaner route signatures)
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
StateMachineDep = Annotated[PositionStateMachine, Depends(get_state_machine)]
SnapshotCacheDep = Annotated[SnapshotCache, Depends(get_snapshot_cache)]
TickSchedulerDep = Annotated[TickScheduler, Depends(get_tick_scheduler)]

OrderHistoryHandlerDep = Annotated[
    GetOrderHistoryHandler, Depends(get_order_history_handler)
]
OpenPositionsHandlerDep = Annotated[
    GetOpenPositionsHandler, Depends(get_open_positions_handler)
]
TotalPnlHandlerDep = Annotated[GetTotalPnlHandler, Depends(get_total_pnl_handler)]
