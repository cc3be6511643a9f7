"""SQLAlchemy implementation of PositionRepository."""

from decimal import Decimal
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from emabot.domain.trading import (
    ExitDetails,
    PnlSummary,
    Position,
    PositionStatus,
    PositionStoreError,
)
from emabot.domain.trading.repositories import (
    PositionRepository as PositionRepositoryPort,
)
from emabot.infrastructure.persistence.sqlalchemy.mappers import PositionMapper
from emabot.infrastructure.persistence.sqlalchemy.models import PositionModel

T = TypeVar("T")


def _store_errors(func_: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Translate driver and ORM failures into PositionStoreError."""

    @wraps(func_)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func_(*args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            raise PositionStoreError(
                f"Position store failed during {func_.__name__}",
                error_type=type(e).__name__,
            ) from e

    return wrapper


class SQLAlchemyPositionRepository(PositionRepositoryPort):
    """SQLAlchemy implementation of PositionRepository port.

    Uses:
    - AsyncSession for async DB operations
    - PositionMapper for Domain <-> ORM conversion
    - A conditional UPDATE for close, so a stale in-memory view can never
      close a record twice

    Example:
        >>> async with session_factory() as session:
        ...     repo = SQLAlchemyPositionRepository(session)
        ...     position = await repo.restore_open("BTCUSDT")
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._mapper = PositionMapper()

    @_store_errors
    async def restore_open(self, symbol: str) -> Optional[Position]:
        stmt = (
            select(PositionModel)
            .where(
                PositionModel.symbol == symbol,
                PositionModel.status == PositionStatus.OPEN.value,
            )
            .order_by(PositionModel.created_at.desc(), PositionModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._mapper.to_entity(model) if model else None

    @_store_errors
    async def insert_open(self, position: Position) -> int:
        """Insert a new OPEN row.

        A second OPEN row for the same symbol violates the partial unique
        index and surfaces as PositionStoreError.
        """
        model = self._mapper.to_model(position)
        self._session.add(model)
        await self._session.flush()  # Get generated ID
        return model.id

    @_store_errors
    async def close_if_open(
        self, position_id: int, exit: ExitDetails
    ) -> Optional[Position]:
        stmt = (
            update(PositionModel)
            .where(
                PositionModel.id == position_id,
                PositionModel.status == PositionStatus.OPEN.value,
            )
            .values(**self._mapper.exit_values(exit))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        model = await self._session.get(
            PositionModel, position_id, populate_existing=True
        )
        return self._mapper.to_entity(model) if model else None

    @_store_errors
    async def list_by_symbol(self, symbol: str, limit: int) -> list[Position]:
        stmt = (
            select(PositionModel)
            .where(PositionModel.symbol == symbol)
            .order_by(PositionModel.created_at.desc(), PositionModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    @_store_errors
    async def list_open(self, symbol: str) -> list[Position]:
        stmt = (
            select(PositionModel)
            .where(
                PositionModel.symbol == symbol,
                PositionModel.status == PositionStatus.OPEN.value,
            )
            .order_by(PositionModel.created_at.desc(), PositionModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    @_store_errors
    async def sum_closed_pnl(self, symbol: str) -> PnlSummary:
        stmt = select(
            func.coalesce(func.sum(PositionModel.profit_loss), 0),
            func.count(PositionModel.id),
        ).where(
            PositionModel.symbol == symbol,
            PositionModel.status == PositionStatus.CLOSED.value,
        )
        result = await self._session.execute(stmt)
        total, count = result.one()
        return PnlSummary(total=Decimal(str(total)), count=int(count))
