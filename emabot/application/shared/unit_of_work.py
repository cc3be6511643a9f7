"""Unit of Work pattern - manages transactions.

One unit of work is one store operation. A flip (close then open) is two
units of work on purpose: the store never sees them as one transaction.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from emabot.domain.trading.repositories import PositionRepository


class UnitOfWork(ABC):
    """Abstract Unit of Work interface.

    Example:
        >>> async with uow:
        ...     closed = await uow.positions.close_if_open(position.id, exit_details)
        ...     await uow.commit()

    Exiting with an exception rolls back.
    """

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            PositionStoreError: If commit failed.
        """
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @property
    @abstractmethod
    def positions(self) -> PositionRepository:
        """Position repository bound to this unit of work."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the underlying store answers."""
        pass
