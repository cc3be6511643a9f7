"""Position State Machine - in-memory owner of the single open position.

The state machine is the only writer of positions. Each open and each close
is its own unit of work, so a flip reaches the store as two independent
operations. The store stays ground truth: ``restore()`` rebuilds the
in-memory position from it at startup.
"""

from typing import Optional

from emabot.application.shared import UnitOfWork
from emabot.config import get_logger
from emabot.domain.trading import (
    ActionKind,
    CrossSignal,
    MarketQuote,
    NoOpenPositionError,
    Position,
    PositionAlreadyOpenError,
    PositionType,
    TradingState,
    TransitionAction,
    plan_transition,
)
from emabot.infrastructure.messaging import EventBus

logger = get_logger(__name__)


class PositionStateMachine:
    """FLAT / LONG / SHORT state machine with flip semantics.

    Example:
        >>> machine = PositionStateMachine("BTCUSDT", uow, event_bus)
        >>> await machine.restore()
        >>> actions = await machine.apply(CrossSignal.DEATH, quote)
        >>> [str(a) for a in actions]
        ['CLOSE LONG', 'OPEN SHORT']
    """

    def __init__(
        self,
        symbol: str,
        uow: UnitOfWork,
        event_bus: Optional[EventBus] = None,
        qty: int = 1,
        reconcile_on_close_miss: bool = True,
    ) -> None:
        self._symbol = symbol
        self._uow = uow
        self._event_bus = event_bus
        self._qty = qty
        self._reconcile_on_close_miss = reconcile_on_close_miss
        self._open_position: Optional[Position] = None

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def open_position(self) -> Optional[Position]:
        return self._open_position

    @property
    def state(self) -> TradingState:
        position = self._open_position
        return TradingState.of(position.position_type if position else None)

    async def restore(self) -> Optional[Position]:
        """Rebuild in-memory state from the most recent OPEN record."""
        async with self._uow:
            position = await self._uow.positions.restore_open(self._symbol)

        self._open_position = position
        logger.info(
            "position.restored",
            state=self.state.value,
            position_id=position.id if position else None,
            entry_price=str(position.entry_price) if position else None,
        )
        return position

    async def apply(
        self, signal: CrossSignal, quote: MarketQuote
    ) -> list[TransitionAction]:
        """Drive the transition table with ``signal``.

        Returns:
            Actions that were executed, in order.

        Raises:
            PositionStoreError: If the store rejects a write. The in-memory
                position then reflects only the steps that succeeded.
        """
        return await self._apply(
            signal, quote, allow_reconcile=self._reconcile_on_close_miss
        )

    async def _apply(
        self, signal: CrossSignal, quote: MarketQuote, allow_reconcile: bool
    ) -> list[TransitionAction]:
        transition = plan_transition(self.state, signal)
        executed: list[TransitionAction] = []

        for action in transition.actions:
            if action.kind == ActionKind.CLOSE:
                if await self._close(quote):
                    executed.append(action)
                    continue
                if allow_reconcile:
                    await self._reconcile()
                    executed.extend(await self._apply(signal, quote, allow_reconcile=False))
                    return executed
            else:
                await self._open(action.position_type, quote)
                executed.append(action)

        return executed

    async def _open(self, position_type: PositionType, quote: MarketQuote) -> Position:
        if self._open_position is not None:
            raise PositionAlreadyOpenError(
                "Cannot open while a position is open",
                symbol=self._symbol,
                open_position_id=self._open_position.id,
            )

        position = Position.open(
            symbol=self._symbol,
            position_type=position_type,
            quote=quote,
            qty=self._qty,
        )

        async with self._uow:
            position_id = await self._uow.positions.insert_open(position)
            await self._uow.commit()

        position.confirm_opened(position_id)
        self._open_position = position
        await self._publish(position)
        return position

    async def _close(self, quote: MarketQuote) -> bool:
        """Close the in-memory position in the store.

        Returns:
            True if the store closed it, False on a reconciliation miss.
            The in-memory position is cleared in both cases.
        """
        position = self._open_position
        if position is None:
            raise NoOpenPositionError("No open position to close", symbol=self._symbol)

        exit_details = position.calculate_exit(quote)

        async with self._uow:
            stored = await self._uow.positions.close_if_open(position.id, exit_details)
            await self._uow.commit()

        self._open_position = None

        if stored is None:
            logger.warning(
                "position.close.reconciliation_miss",
                position_id=position.id,
                position_type=position.position_type.value,
            )
            return False

        position.close(exit_details)
        await self._publish(position)
        return True

    async def _reconcile(self) -> None:
        async with self._uow:
            current = await self._uow.positions.restore_open(self._symbol)

        self._open_position = current
        logger.warning(
            "position.reconciled_from_store",
            state=self.state.value,
            position_id=current.id if current else None,
        )

    async def _publish(self, position: Position) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish_all(position.get_domain_events())
        position.clear_domain_events()
