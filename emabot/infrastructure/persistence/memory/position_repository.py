"""In-memory PositionRepository.

Keeps the same contract as the SQL store (one OPEN row per symbol,
conditional close, newest-first ordering) so dry-run behaves like a live
run without touching a database. Contents are lost on restart.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from emabot.domain.trading import (
    ExitDetails,
    PnlSummary,
    Position,
    PositionStatus,
    PositionStoreError,
)
from emabot.domain.trading.repositories import PositionRepository


@dataclass
class InMemoryPositionStorage:
    """Rows shared by every unit of work of one process."""

    rows: dict[int, Position] = field(default_factory=dict)
    next_id: int = 1


def _copy(position: Position, exit: Optional[ExitDetails] = None) -> Position:
    # Stored rows are never aliased with the caller's aggregate
    closing = exit is not None
    return Position(
        id=position.id,
        symbol=position.symbol,
        position_type=position.position_type,
        qty=position.qty,
        entry_price=position.entry_price,
        entry_time=position.entry_time,
        entry_ema_fast=position.entry_ema_fast,
        entry_ema_slow=position.entry_ema_slow,
        status=PositionStatus.CLOSED if closing else position.status,
        exit=exit if closing else position.exit,
        created_at=position.created_at,
        updated_at=exit.exit_time if closing else position.updated_at,
    )


class InMemoryPositionRepository(PositionRepository):
    def __init__(self, storage: InMemoryPositionStorage) -> None:
        self._storage = storage

    def _newest_first(self, symbol: str, status: Optional[PositionStatus] = None) -> list[Position]:
        rows = [
            p
            for p in self._storage.rows.values()
            if p.symbol == symbol and (status is None or p.status == status)
        ]
        return sorted(rows, key=lambda p: (p.created_at, p.id), reverse=True)

    async def restore_open(self, symbol: str) -> Optional[Position]:
        rows = self._newest_first(symbol, PositionStatus.OPEN)
        return _copy(rows[0]) if rows else None

    async def insert_open(self, position: Position) -> int:
        if self._newest_first(position.symbol, PositionStatus.OPEN):
            raise PositionStoreError(
                "An OPEN position already exists for symbol",
                symbol=position.symbol,
            )

        position_id = self._storage.next_id
        self._storage.next_id += 1

        row = _copy(position)
        row.assign_id(position_id)
        self._storage.rows[position_id] = row
        return position_id

    async def close_if_open(
        self, position_id: int, exit: ExitDetails
    ) -> Optional[Position]:
        row = self._storage.rows.get(position_id)
        if row is None or not row.is_open:
            return None

        closed = _copy(row, exit)
        self._storage.rows[position_id] = closed
        return _copy(closed)

    async def list_by_symbol(self, symbol: str, limit: int) -> list[Position]:
        return [_copy(p) for p in self._newest_first(symbol)[:limit]]

    async def list_open(self, symbol: str) -> list[Position]:
        return [_copy(p) for p in self._newest_first(symbol, PositionStatus.OPEN)]

    async def sum_closed_pnl(self, symbol: str) -> PnlSummary:
        closed = self._newest_first(symbol, PositionStatus.CLOSED)
        total = sum((p.profit_loss for p in closed), Decimal("0"))
        return PnlSummary(total=total, count=len(closed))
