"""Unit tests for PositionStateMachine (in-memory store)."""

from decimal import Decimal

import pytest

from emabot.application.trading.position_state_machine import PositionStateMachine
from emabot.domain.trading import (
    CrossSignal,
    Position,
    PositionClosedEvent,
    PositionOpenedEvent,
    PositionStatus,
    PositionStoreError,
    PositionType,
    TradingState,
)
from emabot.infrastructure.messaging import EventBus
from emabot.infrastructure.persistence.memory import InMemoryUnitOfWork


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def machine(uow, event_bus):
    return PositionStateMachine("BTCUSDT", uow, event_bus)


async def stored(uow) -> list[Position]:
    async with uow:
        return await uow.positions.list_by_symbol("BTCUSDT", 100)


class TestOpenFromFlat:
    @pytest.mark.asyncio
    async def test_golden_opens_long(self, machine, uow, make_quote):
        # Act
        actions = await machine.apply(CrossSignal.GOLDEN, make_quote(12, "10.3", "10.0"))

        # Assert
        assert [str(a) for a in actions] == ["OPEN LONG"]
        assert machine.state == TradingState.LONG
        assert machine.open_position.entry_price == Decimal("12")
        assert machine.open_position.id == 1

        rows = await stored(uow)
        assert len(rows) == 1
        assert rows[0].status == PositionStatus.OPEN
        assert rows[0].position_type == PositionType.LONG
        assert rows[0].entry_ema_fast == Decimal("10.3")

    @pytest.mark.asyncio
    async def test_death_opens_short(self, machine, make_quote):
        actions = await machine.apply(CrossSignal.DEATH, make_quote(9))

        assert [str(a) for a in actions] == ["OPEN SHORT"]
        assert machine.state == TradingState.SHORT

    @pytest.mark.asyncio
    async def test_none_keeps_flat(self, machine, uow, make_quote):
        actions = await machine.apply(CrossSignal.NONE, make_quote(12))

        assert actions == []
        assert machine.state == TradingState.FLAT
        assert await stored(uow) == []


class TestFlip:
    @pytest.mark.asyncio
    async def test_death_flips_long_to_short(self, machine, uow, make_quote):
        # Arrange
        await machine.apply(CrossSignal.GOLDEN, make_quote(12, "10.3", "10.0"))

        # Act
        actions = await machine.apply(CrossSignal.DEATH, make_quote(9, "9.5", "10.0", minutes=10))

        # Assert
        assert [str(a) for a in actions] == ["CLOSE LONG", "OPEN SHORT"]
        assert machine.state == TradingState.SHORT
        assert machine.open_position.entry_price == Decimal("9")

        rows = await stored(uow)
        short, long_ = rows  # newest first
        assert long_.status == PositionStatus.CLOSED
        assert long_.exit_price == Decimal("9")
        assert long_.exit_ema_fast == Decimal("9.5")
        assert long_.profit_loss == Decimal("-3")
        assert short.status == PositionStatus.OPEN
        assert short.position_type == PositionType.SHORT

    @pytest.mark.asyncio
    async def test_golden_flips_short_to_long_with_short_pnl(self, machine, uow, make_quote):
        # Arrange
        await machine.apply(CrossSignal.DEATH, make_quote(9))

        # Act
        await machine.apply(CrossSignal.GOLDEN, make_quote(7, minutes=5))

        # Assert
        rows = await stored(uow)
        assert rows[1].position_type == PositionType.SHORT
        assert rows[1].profit_loss == Decimal("2")
        assert machine.state == TradingState.LONG

    @pytest.mark.asyncio
    async def test_same_direction_signal_is_ignored(self, machine, uow, make_quote):
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))

        actions = await machine.apply(CrossSignal.GOLDEN, make_quote(15, minutes=1))

        assert actions == []
        assert len(await stored(uow)) == 1
        assert machine.open_position.entry_price == Decimal("12")

    @pytest.mark.asyncio
    async def test_at_most_one_open_after_any_sequence(self, machine, uow, make_quote):
        signals = [
            CrossSignal.GOLDEN,
            CrossSignal.GOLDEN,
            CrossSignal.DEATH,
            CrossSignal.NONE,
            CrossSignal.DEATH,
            CrossSignal.GOLDEN,
            CrossSignal.DEATH,
        ]
        for minute, signal in enumerate(signals):
            await machine.apply(signal, make_quote(10 + minute, minutes=minute))

            rows = await stored(uow)
            assert sum(1 for p in rows if p.is_open) <= 1

        rows = await stored(uow)
        assert len(rows) == 4
        assert all(p.profit_loss is not None for p in rows if p.is_closed)


class TestEvents:
    @pytest.mark.asyncio
    async def test_flip_publishes_close_then_open(self, machine, event_bus, make_quote):
        # Arrange
        published = []

        async def collect(event):
            published.append(event)

        event_bus.subscribe(PositionOpenedEvent, collect)
        event_bus.subscribe(PositionClosedEvent, collect)
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))

        # Act
        await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=1))

        # Assert
        assert [type(e) for e in published] == [
            PositionOpenedEvent,
            PositionClosedEvent,
            PositionOpenedEvent,
        ]
        assert published[1].profit_loss == Decimal("-3")


class TestRestore:
    @pytest.mark.asyncio
    async def test_restore_adopts_newest_open(self, uow, make_quote):
        # Arrange: an older CLOSED row and a newer OPEN LONG
        first = PositionStateMachine("BTCUSDT", uow)
        await first.apply(CrossSignal.DEATH, make_quote(15))
        await first.apply(CrossSignal.GOLDEN, make_quote(12, "10.3", "10.0", minutes=5))

        # Act: a new process restores from the same store
        restarted = PositionStateMachine("BTCUSDT", uow)
        restored = await restarted.restore()

        # Assert
        assert restarted.state == TradingState.LONG
        assert restored.id == first.open_position.id
        assert restored.entry_price == Decimal("12")
        assert restored.entry_ema_fast == Decimal("10.3")

    @pytest.mark.asyncio
    async def test_restore_empty_store_is_flat(self, machine):
        assert await machine.restore() is None
        assert machine.state == TradingState.FLAT

    @pytest.mark.asyncio
    async def test_restore_ignores_other_symbols(self, uow, make_quote):
        await PositionStateMachine("ETHUSDT", uow).apply(CrossSignal.GOLDEN, make_quote(3000))

        machine = PositionStateMachine("BTCUSDT", uow)
        await machine.restore()

        assert machine.state == TradingState.FLAT


class TestCloseMiss:
    @staticmethod
    async def _close_externally_and_open_short(uow, position_id, make_quote):
        async with uow:
            row = (await uow.positions.list_open("BTCUSDT"))[0]
            await uow.positions.close_if_open(position_id, row.calculate_exit(make_quote(11, minutes=1)))
            await uow.positions.insert_open(
                Position.open("BTCUSDT", PositionType.SHORT, make_quote(11, minutes=1))
            )
            await uow.commit()

    @pytest.mark.asyncio
    async def test_reconcile_adopts_stored_open_position(self, machine, uow, make_quote):
        # Arrange: in memory LONG, store already holds a newer OPEN SHORT
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))
        await self._close_externally_and_open_short(uow, machine.open_position.id, make_quote)

        # Act
        actions = await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=2))

        # Assert: no duplicate SHORT opened
        assert actions == []
        assert machine.state == TradingState.SHORT
        assert machine.open_position.id == 2
        rows = await stored(uow)
        assert sum(1 for p in rows if p.is_open) == 1

    @pytest.mark.asyncio
    async def test_reconcile_with_empty_store_opens_target(self, machine, uow, make_quote):
        # Arrange
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))
        async with uow:
            position = machine.open_position
            await uow.positions.close_if_open(
                position.id, position.calculate_exit(make_quote(11, minutes=1))
            )
            await uow.commit()

        # Act
        actions = await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=2))

        # Assert
        assert [str(a) for a in actions] == ["OPEN SHORT"]
        assert machine.state == TradingState.SHORT

    @pytest.mark.asyncio
    async def test_reconcile_closes_adopted_opposite_position(self, machine, uow, make_quote):
        # Arrange: in memory LONG 1, store replaced it with a newer OPEN LONG 2
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))
        async with uow:
            position = machine.open_position
            await uow.positions.close_if_open(
                position.id, position.calculate_exit(make_quote(11, minutes=1))
            )
            await uow.positions.insert_open(
                Position.open("BTCUSDT", PositionType.LONG, make_quote(11, minutes=1))
            )
            await uow.commit()

        # Act
        actions = await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=2))

        # Assert
        assert [str(a) for a in actions] == ["CLOSE LONG", "OPEN SHORT"]
        assert machine.state == TradingState.SHORT
        rows = {p.id: p for p in await stored(uow)}
        assert [p.id for p in rows.values() if p.is_open] == [3]
        assert rows[2].status == PositionStatus.CLOSED
        assert rows[2].profit_loss == Decimal("-2")

    @pytest.mark.asyncio
    async def test_without_reconcile_miss_clears_and_opens(self, uow, make_quote):
        # Arrange
        machine = PositionStateMachine("BTCUSDT", uow, reconcile_on_close_miss=False)
        await machine.apply(CrossSignal.GOLDEN, make_quote(12))
        await self._close_externally_and_open_short(uow, machine.open_position.id, make_quote)

        # Act & Assert: the store rejects a second OPEN row
        with pytest.raises(PositionStoreError):
            await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=2))
        assert machine.state == TradingState.FLAT


class TestStoreFailure:
    @pytest.mark.asyncio
    async def test_failed_open_leaves_machine_flat(self, make_quote):
        # Arrange
        uow = InMemoryUnitOfWork()
        blocker = PositionStateMachine("BTCUSDT", uow)
        await blocker.apply(CrossSignal.GOLDEN, make_quote(12))
        machine = PositionStateMachine("BTCUSDT", uow)

        # Act & Assert
        with pytest.raises(PositionStoreError):
            await machine.apply(CrossSignal.DEATH, make_quote(9, minutes=1))
        assert machine.state == TradingState.FLAT
