"""SQLAlchemy Unit of Work implementation."""

from types import TracebackType
from typing import Optional, Type

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from emabot.application.shared import UnitOfWork
from emabot.config import get_logger
from emabot.domain.trading import PositionStoreError
from emabot.domain.trading.repositories import PositionRepository
from emabot.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyPositionRepository,
)

logger = get_logger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of Unit of Work pattern.

    Responsibilities:
    - A fresh AsyncSession per ``async with`` block
    - Transaction management (commit/rollback)
    - Automatic rollback on exceptions
    - Lazy initialization of the repository

    The instance is reusable: every ``async with`` opens a new session.
    Blocks must not overlap, which the tick scheduler guarantees for writes.
    Read queries get their own instance per request.

    Example:
        >>> session_factory = async_sessionmaker(engine, expire_on_commit=False)
        >>> uow = SQLAlchemyUnitOfWork(session_factory)
        >>>
        >>> async with uow:
        ...     position_id = await uow.positions.insert_open(position)
        ...     await uow.commit()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._positions: Optional[PositionRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Roll back if the block raised, always close the session."""
        try:
            if exc_type is not None:
                await self.rollback()
                logger.warning(
                    "unit_of_work.rolled_back",
                    exception_type=exc_type.__name__,
                )
        except (SQLAlchemyError, OSError) as e:
            # The original exception is the one worth propagating
            logger.warning("unit_of_work.rollback_failed", error=str(e))
        finally:
            if self._session:
                await self._session.close()
                self._session = None
                self._positions = None

    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            PositionStoreError: If commit failed.
        """
        session = self._require_session()
        try:
            await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("unit_of_work.commit_failed", error=str(e))
            raise PositionStoreError(
                "Position store commit failed", error_type=type(e).__name__
            ) from e

    async def rollback(self) -> None:
        await self._require_session().rollback()

    @property
    def positions(self) -> PositionRepository:
        session = self._require_session()
        if self._positions is None:
            self._positions = SQLAlchemyPositionRepository(session)
        return self._positions

    async def ping(self) -> bool:
        """Run ``SELECT 1`` on a short-lived session."""
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("store.ping_failed", error=str(e))
            return False

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")
        return self._session


def create_unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyUnitOfWork:
    """Factory for creating a Unit of Work (dependency injection)."""
    return SQLAlchemyUnitOfWork(session_factory)
