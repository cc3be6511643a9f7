"""Unit tests for TickScheduler (non-reentrant tick guard)."""

import asyncio
from datetime import datetime, timezone

import pytest

from emabot.application.shared import CommandHandler
from emabot.application.trading.commands import TickTrigger
from emabot.application.trading.dtos import TickOutcome, TickResult
from emabot.domain.trading import PositionStoreError
from emabot.presentation.workers import TickScheduler, seconds_until_next_boundary


class GatedEngine(CommandHandler):
    """Blocks inside handle() until ``gate`` is set."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.commands = []

    async def handle(self, command):
        self.commands.append(command)
        await self.gate.wait()
        return TickResult(outcome=TickOutcome.COMPLETED)


class CountingEngine(CommandHandler):
    def __init__(self) -> None:
        self.commands = []

    async def handle(self, command):
        self.commands.append(command)
        return TickResult(outcome=TickOutcome.COMPLETED)


class FailingEngine(CommandHandler):
    async def handle(self, command):
        raise PositionStoreError("Position store failed during insert_open")


class TestRequestTick:
    @pytest.mark.asyncio
    async def test_requests_during_inflight_tick_are_dropped(self):
        # Arrange
        engine = GatedEngine()
        scheduler = TickScheduler(engine)
        first = asyncio.create_task(scheduler.request_tick(TickTrigger.TIMER))
        await asyncio.sleep(0)  # let the first tick enter the engine

        # Act
        second = await scheduler.request_tick(TickTrigger.MANUAL)
        third = await scheduler.request_tick(TickTrigger.STALE_READ)
        engine.gate.set()
        result = await first

        # Assert
        assert second is None
        assert third is None
        assert result.outcome == TickOutcome.COMPLETED
        assert len(engine.commands) == 1
        assert engine.commands[0].trigger == TickTrigger.TIMER
        assert scheduler.busy is False

    @pytest.mark.asyncio
    async def test_sequential_requests_all_run(self):
        engine = CountingEngine()
        scheduler = TickScheduler(engine)

        await scheduler.request_tick(TickTrigger.MANUAL)
        await scheduler.request_tick(TickTrigger.MANUAL)

        assert len(engine.commands) == 2

    @pytest.mark.asyncio
    async def test_engine_error_becomes_failed_result(self):
        # Arrange
        scheduler = TickScheduler(FailingEngine())

        # Act
        result = await scheduler.request_tick(TickTrigger.MANUAL)

        # Assert
        assert result.outcome == TickOutcome.FAILED
        assert "insert_open" in result.error
        assert scheduler.busy is False


class TestTimerLoop:
    @pytest.mark.asyncio
    async def test_timer_ticks_until_stopped(self):
        engine = CountingEngine()
        scheduler = TickScheduler(engine, interval_seconds=0.02)

        scheduler.start()
        await asyncio.sleep(0.2)
        await scheduler.stop()

        assert len(engine.commands) >= 1
        assert all(c.trigger == TickTrigger.TIMER for c in engine.commands)
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_stop_interrupts_wait(self):
        engine = CountingEngine()
        scheduler = TickScheduler(engine, interval_seconds=3600)

        scheduler.start()
        await asyncio.sleep(0)
        await asyncio.wait_for(scheduler.stop(), timeout=1)

        assert engine.commands == []

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        scheduler = TickScheduler(CountingEngine(), interval_seconds=3600)

        scheduler.start()
        task = scheduler._task
        scheduler.start()

        assert scheduler._task is task
        await scheduler.stop()


class TestSecondsUntilNextBoundary:
    @pytest.mark.parametrize(
        "second, expected",
        [(0, 60.0), (1, 59.0), (45, 15.0), (59, 1.0)],
    )
    def test_minute_alignment(self, second, expected):
        now = datetime(2024, 5, 1, 12, 0, second, tzinfo=timezone.utc)

        assert seconds_until_next_boundary(now, 60) == pytest.approx(expected)

    def test_boundary_closer_than_min_delay_is_skipped(self):
        now = datetime(2024, 5, 1, 12, 0, 59, 980000, tzinfo=timezone.utc)

        assert seconds_until_next_boundary(now, 60) == pytest.approx(0.02)
        assert seconds_until_next_boundary(now, 60, min_delay=1.0) == pytest.approx(60.02)

    def test_boundary_at_min_delay_is_kept(self):
        now = datetime(2024, 5, 1, 12, 0, 59, tzinfo=timezone.utc)

        assert seconds_until_next_boundary(now, 60, min_delay=1.0) == pytest.approx(1.0)


class TestTimerWakeFloor:
    @pytest.mark.asyncio
    async def test_early_wake_does_not_tick_twice(self):
        # Arrange: the wall clock reads just before the boundary after every tick
        engine = CountingEngine()
        near_boundary = datetime(2024, 5, 1, 12, 0, 59, 990000, tzinfo=timezone.utc)
        scheduler = TickScheduler(
            engine, interval_seconds=0.5, clock=lambda: near_boundary, min_delay_seconds=0.2
        )

        # Act
        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()

        # Assert: the 0.01 s boundary was skipped for the following one
        assert engine.commands == []
