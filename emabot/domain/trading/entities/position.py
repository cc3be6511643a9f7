"""Position Aggregate Root - single LONG/SHORT position for one symbol.

Position is responsible for:
- Entry snapshot (price, time, EMA values) fixed at open
- Exit snapshot and realized PnL fixed at close, exactly once
- Position lifecycle (OPEN -> CLOSED)
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from emabot.domain.shared import AggregateRoot

from ..events.position_events import PositionClosedEvent, PositionOpenedEvent
from ..exceptions.trading_exceptions import (
    PositionAlreadyClosedError,
    PositionIntegrityError,
)
from ..value_objects import ExitDetails, MarketQuote, PositionStatus, PositionType


class Position(AggregateRoot):
    """Position Aggregate Root.

    Rules:
    - A position is created OPEN from the quote of the tick that opened it
    - Entry fields never change after open
    - ``exit`` is present iff status is CLOSED, and is set once
    - profit_loss = (exit - entry) * qty for LONG, (entry - exit) * qty for SHORT

    Example:
        >>> position = Position.open(
        ...     symbol="BTCUSDT",
        ...     position_type=PositionType.LONG,
        ...     quote=quote,
        ... )
        >>> position.confirm_opened(position_id=1)  # after the store insert
        >>> exit_details = position.calculate_exit(later_quote)
        >>> position.close(exit_details)  # after the store accepted the close
    """

    def __init__(
        self,
        symbol: str,
        position_type: PositionType,
        entry_price: Decimal,
        entry_time: datetime,
        entry_ema_fast: Decimal,
        entry_ema_slow: Decimal,
        qty: int = 1,
        status: PositionStatus = PositionStatus.OPEN,
        exit: Optional[ExitDetails] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        id: Optional[int] = None,
    ) -> None:
        """Initialize position.

        Raises:
            PositionIntegrityError: If exit data does not match the status.
        """
        super().__init__(id)

        if status == PositionStatus.OPEN and exit is not None:
            raise PositionIntegrityError(
                "OPEN position cannot carry exit data", position_id=id, symbol=symbol
            )
        if status == PositionStatus.CLOSED and exit is None:
            raise PositionIntegrityError(
                "CLOSED position requires exit data", position_id=id, symbol=symbol
            )

        self.symbol = symbol
        self.position_type = position_type
        self.qty = qty

        # Entry snapshot
        self.entry_price = entry_price
        self.entry_time = entry_time
        self.entry_ema_fast = entry_ema_fast
        self.entry_ema_slow = entry_ema_slow

        self.status = status
        self.exit = exit

        self.created_at = created_at or entry_time
        self.updated_at = updated_at or self.created_at

    @classmethod
    def open(
        cls,
        symbol: str,
        position_type: PositionType,
        quote: MarketQuote,
        qty: int = 1,
    ) -> "Position":
        """Factory for a new OPEN position from the triggering quote."""
        return cls(
            symbol=symbol,
            position_type=position_type,
            qty=qty,
            entry_price=quote.price,
            entry_time=quote.at,
            entry_ema_fast=quote.ema_fast,
            entry_ema_slow=quote.ema_slow,
            created_at=quote.at,
            updated_at=quote.at,
        )

    def confirm_opened(self, position_id: int) -> None:
        """Record the store-assigned ID and emit PositionOpenedEvent."""
        self.assign_id(position_id)
        self.add_domain_event(
            PositionOpenedEvent(
                position_id=position_id,
                symbol=self.symbol,
                position_type=self.position_type.value,
                entry_price=self.entry_price,
                qty=self.qty,
            )
        )

    def calculate_pnl(self, exit_price: Decimal) -> Decimal:
        """Profit/loss if the position were closed at ``exit_price``."""
        if self.position_type == PositionType.LONG:
            return (exit_price - self.entry_price) * self.qty
        return (self.entry_price - exit_price) * self.qty

    def calculate_exit(self, quote: MarketQuote) -> ExitDetails:
        """Build the exit fields for closing at ``quote``.

        Does not change the position; the store applies the close first.

        Raises:
            PositionAlreadyClosedError: If position is not OPEN.
        """
        self._ensure_open()
        return ExitDetails(
            exit_price=quote.price,
            exit_time=quote.at,
            exit_ema_fast=quote.ema_fast,
            exit_ema_slow=quote.ema_slow,
            profit_loss=self.calculate_pnl(quote.price),
        )

    def close(self, exit: ExitDetails) -> Decimal:
        """Transition OPEN -> CLOSED with ``exit``.

        Returns:
            Realized profit/loss.

        Raises:
            PositionAlreadyClosedError: If position is not OPEN.
        """
        self._ensure_open()

        self.status = PositionStatus.CLOSED
        self.exit = exit
        self.updated_at = exit.exit_time

        self.add_domain_event(
            PositionClosedEvent(
                position_id=self.id or 0,
                symbol=self.symbol,
                position_type=self.position_type.value,
                entry_price=self.entry_price,
                exit_price=exit.exit_price,
                qty=self.qty,
                profit_loss=exit.profit_loss,
            )
        )

        return exit.profit_loss

    def _ensure_open(self) -> None:
        if self.status != PositionStatus.OPEN:
            raise PositionAlreadyClosedError(
                "Position already closed",
                position_id=self.id,
                status=self.status.value,
            )

    @property
    def is_open(self) -> bool:
        return self.status == PositionStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status == PositionStatus.CLOSED

    @property
    def exit_price(self) -> Optional[Decimal]:
        return self.exit.exit_price if self.exit else None

    @property
    def exit_time(self) -> Optional[datetime]:
        return self.exit.exit_time if self.exit else None

    @property
    def exit_ema_fast(self) -> Optional[Decimal]:
        return self.exit.exit_ema_fast if self.exit else None

    @property
    def exit_ema_slow(self) -> Optional[Decimal]:
        return self.exit.exit_ema_slow if self.exit else None

    @property
    def profit_loss(self) -> Optional[Decimal]:
        return self.exit.profit_loss if self.exit else None

    def __repr__(self) -> str:
        return (
            f"Position(id={self.id}, symbol={self.symbol}, "
            f"type={self.position_type.value}, status={self.status.value}, "
            f"entry_price={self.entry_price})"
        )
