"""Unit tests for TickEngine."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from emabot.application.trading.commands import RunTickCommand, TickTrigger
from emabot.application.trading.dtos import TickOutcome
from emabot.application.trading.handlers import TickEngine
from emabot.application.trading.position_state_machine import PositionStateMachine
from emabot.application.trading.snapshot_cache import SnapshotCache
from emabot.domain.market_data import MalformedMarketDataError, MarketDataUnavailableError
from emabot.domain.trading import (
    CrossSignal,
    PositionStatus,
    PositionStoreError,
    TradingState,
)
from emabot.infrastructure.persistence.memory import (
    InMemoryPositionRepository,
    InMemoryUnitOfWork,
)

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

FAST, SLOW = 2, 3


class ScriptedEma:
    """Returns preset series per period instead of computing them."""

    def __init__(self) -> None:
        self.series: dict[int, list[float]] = {}

    def __call__(self, values, period):
        return self.series[period]


class RejectingInsertRepository(InMemoryPositionRepository):
    async def insert_open(self, position):
        raise PositionStoreError("Position store failed during insert_open")


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def cache():
    return SnapshotCache()


@pytest.fixture
def ema():
    return ScriptedEma()


def build_engine(market_data, uow, cache, ema=None):
    machine = PositionStateMachine("BTCUSDT", uow)
    options = {"ema": ema} if ema is not None else {}
    engine = TickEngine(
        symbol="BTCUSDT",
        interval="1m",
        fast_period=FAST,
        slow_period=SLOW,
        candle_margin=50,
        market_data=market_data,
        state_machine=machine,
        cache=cache,
        clock=lambda: T0,
        **options,
    )
    return engine, machine


class TestTickEngineScenarios:
    @pytest.mark.asyncio
    async def test_golden_cross_opens_long_at_last_close(self, fake_market_data, uow, cache, ema):
        # Arrange
        fake_market_data.set_closes([10, 10, 11, 12])
        ema.series = {FAST: [9.9, 10.3], SLOW: [10.1, 10.0]}
        engine, machine = build_engine(fake_market_data, uow, cache, ema)

        # Act
        result = await engine.handle(RunTickCommand())

        # Assert
        assert result.outcome == TickOutcome.COMPLETED
        assert result.ok is True
        assert result.signal == CrossSignal.GOLDEN
        assert [str(a) for a in result.actions] == ["OPEN LONG"]
        assert machine.state == TradingState.LONG
        assert machine.open_position.entry_price == Decimal("12")
        assert machine.open_position.entry_ema_fast == Decimal("10.3")
        assert machine.open_position.entry_ema_slow == Decimal("10.0")
        assert machine.open_position.entry_time == T0

        snapshot = cache.current
        assert snapshot.price == Decimal("12")
        assert snapshot.signal == CrossSignal.GOLDEN
        assert snapshot.tick_at == T0

    @pytest.mark.asyncio
    async def test_death_cross_flips_long_to_short(self, fake_market_data, uow, cache, ema):
        # Arrange
        engine, machine = build_engine(fake_market_data, uow, cache, ema)
        fake_market_data.set_closes([10, 10, 11, 12])
        ema.series = {FAST: [9.9, 10.3], SLOW: [10.1, 10.0]}
        await engine.handle(RunTickCommand())

        fake_market_data.set_closes([11, 12, 10, 9])
        ema.series = {FAST: [10.3, 9.5], SLOW: [10.0, 10.0]}

        # Act
        result = await engine.handle(RunTickCommand())

        # Assert
        assert result.signal == CrossSignal.DEATH
        assert [str(a) for a in result.actions] == ["CLOSE LONG", "OPEN SHORT"]
        assert machine.state == TradingState.SHORT
        assert machine.open_position.entry_price == Decimal("9")

        async with uow:
            closed = (await uow.positions.list_by_symbol("BTCUSDT", 10))[1]
        assert closed.status == PositionStatus.CLOSED
        assert closed.profit_loss == Decimal("-3")

    @pytest.mark.asyncio
    async def test_no_cross_still_refreshes_snapshot(self, fake_market_data, uow, cache, ema):
        fake_market_data.set_closes([10, 11, 12])
        ema.series = {FAST: [10.5, 10.6], SLOW: [10.0, 10.1]}
        engine, machine = build_engine(fake_market_data, uow, cache, ema)

        result = await engine.handle(RunTickCommand(trigger=TickTrigger.MANUAL))

        assert result.signal == CrossSignal.NONE
        assert result.actions == []
        assert machine.state == TradingState.FLAT
        assert cache.current.signal == CrossSignal.NONE
        assert cache.current.ema_fast == Decimal("10.6")

    @pytest.mark.asyncio
    async def test_requests_slow_period_plus_margin(self, fake_market_data, uow, cache, ema):
        fake_market_data.set_closes([10, 11, 12])
        ema.series = {FAST: [10.5, 10.6], SLOW: [10.0, 10.1]}
        engine, _ = build_engine(fake_market_data, uow, cache, ema)

        await engine.handle(RunTickCommand())

        assert fake_market_data.calls == [("BTCUSDT", "1m", SLOW + 50)]


class TestTickEngineAborts:
    @pytest.mark.asyncio
    async def test_fewer_closes_than_slow_period(self, fake_market_data, uow, cache):
        # Arrange
        fake_market_data.set_closes([10, 11])
        engine, machine = build_engine(fake_market_data, uow, cache)

        # Act
        result = await engine.handle(RunTickCommand())

        # Assert
        assert result.outcome == TickOutcome.INSUFFICIENT_DATA
        assert result.snapshot is None
        assert cache.current is None
        assert machine.state == TradingState.FLAT

    @pytest.mark.asyncio
    async def test_single_slow_ema_point_is_insufficient(self, fake_market_data, uow, cache):
        # Exactly SLOW closes -> one slow EMA value, no previous point
        fake_market_data.set_closes([10, 11, 12])
        engine, _ = build_engine(fake_market_data, uow, cache)

        result = await engine.handle(RunTickCommand())

        assert result.outcome == TickOutcome.INSUFFICIENT_DATA
        assert cache.current is None

    @pytest.mark.asyncio
    async def test_insufficient_data_keeps_previous_snapshot(self, fake_market_data, uow, cache, ema):
        # Arrange
        fake_market_data.set_closes([10, 11, 12])
        ema.series = {FAST: [10.5, 10.6], SLOW: [10.0, 10.1]}
        engine, _ = build_engine(fake_market_data, uow, cache, ema)
        await engine.handle(RunTickCommand())
        before = cache.current

        fake_market_data.set_closes([10])

        # Act
        result = await engine.handle(RunTickCommand())

        # Assert
        assert result.outcome == TickOutcome.INSUFFICIENT_DATA
        assert cache.current is before

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            MarketDataUnavailableError("Price source unavailable", status_code=503),
            MalformedMarketDataError("Expected a list of candles"),
        ],
    )
    async def test_fetch_failure_leaves_state_unchanged(self, fake_market_data, uow, cache, error):
        # Arrange
        fake_market_data.error = error
        engine, machine = build_engine(fake_market_data, uow, cache)

        # Act
        result = await engine.handle(RunTickCommand())

        # Assert
        assert result.outcome == TickOutcome.FETCH_FAILED
        assert result.error == str(error)
        assert cache.current is None
        assert machine.state == TradingState.FLAT


class TestTickEngineStoreFailure:
    @pytest.mark.asyncio
    async def test_open_failure_propagates_after_snapshot_write(self, fake_market_data, cache, ema):
        # Arrange
        uow = InMemoryUnitOfWork()
        uow._positions = RejectingInsertRepository(uow.storage)
        fake_market_data.set_closes([10, 10, 11, 12])
        ema.series = {FAST: [9.9, 10.3], SLOW: [10.1, 10.0]}
        engine, machine = build_engine(fake_market_data, uow, cache, ema)

        # Act & Assert
        with pytest.raises(PositionStoreError):
            await engine.handle(RunTickCommand())
        assert cache.current is not None
        assert cache.current.signal == CrossSignal.GOLDEN
        assert machine.state == TradingState.FLAT


class TestTickOutcome:
    @pytest.mark.parametrize(
        "outcome, wire",
        [
            (TickOutcome.COMPLETED, "COMPLETED"),
            (TickOutcome.INSUFFICIENT_DATA, "INSUFFICIENT_DATA"),
            (TickOutcome.FETCH_FAILED, "FETCH_FAILED"),
            (TickOutcome.FAILED, "FAILED"),
        ],
    )
    def test_outcome_values_are_upper_case(self, outcome, wire):
        assert outcome.value == wire
