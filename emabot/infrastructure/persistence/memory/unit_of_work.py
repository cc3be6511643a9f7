"""In-memory Unit of Work.

Rows are written straight into the shared storage; rollback restores the
rows as they were when the block was entered.
"""

from types import TracebackType
from typing import Optional, Type

from emabot.application.shared import UnitOfWork
from emabot.domain.trading.repositories import PositionRepository

from .position_repository import InMemoryPositionRepository, InMemoryPositionStorage


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, storage: Optional[InMemoryPositionStorage] = None) -> None:
        self.storage = storage or InMemoryPositionStorage()
        self._positions = InMemoryPositionRepository(self.storage)
        self._checkpoint: Optional[tuple[dict, int]] = None

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._checkpoint = (dict(self.storage.rows), self.storage.next_id)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None:
            await self.rollback()
        self._checkpoint = None

    async def commit(self) -> None:
        self._checkpoint = (dict(self.storage.rows), self.storage.next_id)

    async def rollback(self) -> None:
        if self._checkpoint is not None:
            rows, next_id = self._checkpoint
            self.storage.rows = dict(rows)
            self.storage.next_id = next_id

    @property
    def positions(self) -> PositionRepository:
        return self._positions

    async def ping(self) -> bool:
        return True
