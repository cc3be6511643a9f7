"""FastAPI application - EMA Crossover Trading Bot.

Clean Architecture implementation with:
- Domain-Driven Design (Position aggregate, transition table)
- CQRS (RunTick command, read-only position queries)
- Event-Driven Architecture (position events on an in-process bus)
- Hexagonal Architecture (market data and store behind ports)

Production-ready with:
- Configuration from environment variables
- Health check endpoints
- Structured logging
- CORS configuration

Usage:
    emabot                       # console script
    uvicorn emabot.main:app      # any ASGI server
"""

import uuid
from contextlib import asynccontextmanager
from functools import partial
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from emabot import __version__
from emabot.application.shared import UnitOfWork
from emabot.application.trading.handlers import TickEngine
from emabot.application.trading.position_state_machine import PositionStateMachine
from emabot.application.trading.snapshot_cache import SnapshotCache
from emabot.config import (
    Settings,
    bind_request_context,
    clear_request_context,
    get_logger,
    get_settings,
    setup_logging,
)
from emabot.domain.market_data import MarketDataPort
from emabot.domain.trading import PositionClosedEvent, PositionOpenedEvent, PositionStoreError
from emabot.infrastructure.market_data import BinanceMarketDataClient
from emabot.infrastructure.messaging import EventBus, log_position_event
from emabot.infrastructure.persistence.memory import InMemoryPositionStorage, InMemoryUnitOfWork
from emabot.infrastructure.persistence.sqlalchemy import (
    create_engine,
    create_session_factory,
    create_unit_of_work,
    init_models,
)
from emabot.presentation.api import dependencies
from emabot.presentation.api.v1.routes import bot_router, positions_router
from emabot.presentation.workers import TickScheduler

logger = get_logger(__name__)


# ============================================================================
# LIFESPAN EVENTS (startup/shutdown)
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI.

    Startup:
    - Configure logging, warn on inverted EMA periods
    - Select the store: in-memory in dry-run, SQL otherwise (tables created)
    - Restore the open position from the store
    - Wire the tick engine and start the scheduler

    Shutdown:
    - Stop the scheduler (an in-flight tick completes)
    - Close the market data client and the database engine

    An unreachable store in live mode aborts startup.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)

    logger.info(
        "application.startup.started",
        interval=settings.interval,
        ema_fast=settings.ema_fast,
        ema_slow=settings.ema_slow,
        dry_run=settings.dry_run,
    )
    if settings.ema_periods_inverted:
        logger.warning(
            "config.ema_periods_inverted",
            ema_fast=settings.ema_fast,
            ema_slow=settings.ema_slow,
        )

    # ===== STARTUP =====
    engine = None
    uow_factory: Optional[Callable[[], UnitOfWork]] = app.state.uow_factory
    if uow_factory is None:
        if settings.dry_run:
            storage = InMemoryPositionStorage()
            uow_factory = partial(InMemoryUnitOfWork, storage)
            logger.info("application.store.in_memory")
        else:
            engine = create_engine(settings)
            try:
                await init_models(engine)
            except (SQLAlchemyError, OSError) as e:
                logger.critical("application.store.unreachable", error=str(e))
                await engine.dispose()
                raise PositionStoreError(
                    "Position store unreachable at startup", db_name=settings.db_name
                ) from e
            uow_factory = partial(create_unit_of_work, create_session_factory(engine))
            logger.info("application.store.connected", db_name=settings.db_name)

    market_data: Optional[MarketDataPort] = app.state.market_data
    owns_market_data = market_data is None
    if market_data is None:
        market_data = BinanceMarketDataClient(
            base_url=settings.market_data_base_url,
            timeout=settings.market_data_timeout,
            max_retries=settings.market_data_max_retries,
            retry_base_delay=settings.market_data_retry_base_delay,
        )

    event_bus = EventBus()
    event_bus.subscribe(PositionOpenedEvent, log_position_event)
    event_bus.subscribe(PositionClosedEvent, log_position_event)

    state_machine = PositionStateMachine(
        symbol=settings.symbol,
        uow=uow_factory(),
        event_bus=event_bus,
        qty=settings.position_qty,
        reconcile_on_close_miss=settings.reconcile_on_close_miss,
    )
    try:
        await state_machine.restore()
    except Exception as e:
        logger.critical("application.startup.restore_failed", error=str(e))
        if owns_market_data:
            await market_data.close()
        if engine is not None:
            await engine.dispose()
        raise

    cache = SnapshotCache()
    tick_engine = TickEngine(
        symbol=settings.symbol,
        interval=settings.interval,
        fast_period=settings.ema_fast,
        slow_period=settings.ema_slow,
        candle_margin=settings.candle_margin,
        market_data=market_data,
        state_machine=state_machine,
        cache=cache,
    )
    scheduler = TickScheduler(tick_engine, interval_seconds=settings.tick_interval_seconds)

    dependencies.init_dependencies(
        settings=settings,
        uow_factory=uow_factory,
        state_machine=state_machine,
        snapshot_cache=cache,
        scheduler=scheduler,
    )

    if settings.scheduler_enabled:
        scheduler.start()

    logger.info("application.startup.completed", port=settings.port)

    yield  # Application running

    # ===== SHUTDOWN =====
    logger.info("application.shutdown.started")

    await scheduler.stop()
    if owns_market_data:
        await market_data.close()
    if engine is not None:
        await engine.dispose()

    logger.info("application.shutdown.completed")


# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to add request correlation ID to all log messages."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        bind_request_context(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


# ============================================================================
# ERROR HANDLERS
# ============================================================================


async def store_error_handler(request: Request, exc: PositionStoreError) -> JSONResponse:
    """Position store failures -> 503."""
    logger.error(
        "api.store_unavailable",
        path=request.url.path,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "StoreUnavailable", "message": exc.message},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        "api.validation_error",
        path=request.url.path,
        errors=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "api.unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# ============================================================================
# CREATE FASTAPI APPLICATION
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    market_data: Optional[MarketDataPort] = None,
    uow_factory: Optional[Callable[[], UnitOfWork]] = None,
) -> FastAPI:
    """Build the application.

    Nothing connects until the lifespan runs.

    Args:
        settings: Defaults to environment-based settings.
        market_data: Price source; defaults to the Binance client.
        uow_factory: Store override; defaults to in-memory (dry-run) or SQL.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        Single-symbol EMA crossover bot.

        ## Features
        - GOLDEN cross opens LONG, DEATH cross opens SHORT, the opposite cross flips
        - Positions persisted with entry/exit snapshot and realized PnL
        - Read-only views over positions and the latest price/EMA snapshot
        """,
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.market_data = market_data
    app.state.uow_factory = uow_factory

    # Order matters - last added is executed first
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PositionStoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get(
        "/health/live",
        tags=["Health"],
        summary="Liveness probe",
        description="Simple check that application is running",
    )
    async def liveness_check() -> dict:
        return {"status": "alive"}

    @app.get("/", tags=["Root"], summary="API root")
    async def root() -> dict:
        return {
            "message": "EMA Crossover Bot",
            "version": __version__,
            "symbol": settings.symbol,
            "health": "/api/v1/health",
        }

    app.include_router(bot_router, prefix="/api/v1")
    app.include_router(positions_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on settings.host:settings.port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
