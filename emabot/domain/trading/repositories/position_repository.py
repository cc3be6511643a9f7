"""PositionRepository Port - interface for persisting Position aggregates."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities import Position
from ..value_objects import ExitDetails, PnlSummary


class PositionRepository(ABC):
    """Abstract interface for position persistence.

    The store is passive: the position state machine is its only writer.
    Failures surface as ``PositionStoreError``.

    Example (state machine uses):
        >>> async with uow:
        ...     position_id = await uow.positions.insert_open(position)
        ...     await uow.commit()
    """

    @abstractmethod
    async def restore_open(self, symbol: str) -> Optional[Position]:
        """Get the most recently created OPEN position for ``symbol``.

        Returns:
            Position entity or None.

        Note:
            Read once at startup to rebuild in-memory state, and again when a
            conditional close misses.
        """
        pass

    @abstractmethod
    async def insert_open(self, position: Position) -> int:
        """Persist a new OPEN position.

        Returns:
            Store-assigned position ID.

        Raises:
            PositionStoreError: If the write is rejected or the store fails.
        """
        pass

    @abstractmethod
    async def close_if_open(
        self, position_id: int, exit: ExitDetails
    ) -> Optional[Position]:
        """Atomically transition (id, status=OPEN) to CLOSED with ``exit``.

        Returns:
            The updated position, or None if no matching OPEN record exists.
        """
        pass

    @abstractmethod
    async def list_by_symbol(self, symbol: str, limit: int) -> list[Position]:
        """Get positions for ``symbol``, newest first, at most ``limit``."""
        pass

    @abstractmethod
    async def list_open(self, symbol: str) -> list[Position]:
        """Get OPEN positions for ``symbol``, newest first (expected <= 1)."""
        pass

    @abstractmethod
    async def sum_closed_pnl(self, symbol: str) -> PnlSummary:
        """Sum profit_loss and count over CLOSED positions for ``symbol``."""
        pass
