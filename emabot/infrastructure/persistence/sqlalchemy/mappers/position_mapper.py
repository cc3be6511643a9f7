"""Position Mapper - converts between Position entity and PositionModel ORM."""

from datetime import datetime, timezone
from typing import Optional

from emabot.domain.trading import (
    ExitDetails,
    Position,
    PositionIntegrityError,
    PositionStatus,
    PositionType,
)
from emabot.infrastructure.persistence.sqlalchemy.models import PositionModel

_EXIT_COLUMNS = ("exit_price", "exit_time", "exit_ema_fast", "exit_ema_slow", "profit_loss")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PositionMapper:
    """Mapper for Position entity <-> PositionModel ORM.

    Example:
        >>> mapper = PositionMapper()
        >>> model = mapper.to_model(position)  # Domain -> ORM
        >>> position_back = mapper.to_entity(model)  # ORM -> Domain
    """

    def to_entity(self, model: PositionModel) -> Position:
        """Convert ORM PositionModel -> Domain Position entity.

        Raises:
            PositionIntegrityError: If exit columns disagree with the status.
        """
        status = PositionStatus(model.status)
        present = [getattr(model, column) is not None for column in _EXIT_COLUMNS]

        exit_details = None
        if status == PositionStatus.CLOSED:
            if not all(present):
                raise PositionIntegrityError(
                    "CLOSED position has missing exit fields",
                    position_id=model.id,
                )
            exit_details = ExitDetails(
                exit_price=model.exit_price,
                exit_time=_as_utc(model.exit_time),
                exit_ema_fast=model.exit_ema_fast,
                exit_ema_slow=model.exit_ema_slow,
                profit_loss=model.profit_loss,
            )
        elif any(present):
            raise PositionIntegrityError(
                "OPEN position carries exit fields",
                position_id=model.id,
            )

        position = Position(
            id=model.id,
            symbol=model.symbol,
            position_type=PositionType(model.position_type),
            qty=model.qty,
            entry_price=model.entry_price,
            entry_time=_as_utc(model.entry_time),
            entry_ema_fast=model.entry_ema_fast,
            entry_ema_slow=model.entry_ema_slow,
            status=status,
            exit=exit_details,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

        # Events are not replayed from the store
        position.clear_domain_events()

        return position

    def to_model(self, entity: Position) -> PositionModel:
        """Convert Domain Position entity -> ORM PositionModel."""
        return PositionModel(
            id=entity.id,
            symbol=entity.symbol,
            position_type=entity.position_type.value,
            status=entity.status.value,
            qty=entity.qty,
            entry_price=entity.entry_price,
            entry_time=entity.entry_time,
            entry_ema_fast=entity.entry_ema_fast,
            entry_ema_slow=entity.entry_ema_slow,
            exit_price=entity.exit_price,
            exit_time=entity.exit_time,
            exit_ema_fast=entity.exit_ema_fast,
            exit_ema_slow=entity.exit_ema_slow,
            profit_loss=entity.profit_loss,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def exit_values(self, exit: ExitDetails) -> dict:
        """Column values written by a close."""
        return {
            "status": PositionStatus.CLOSED.value,
            "exit_price": exit.exit_price,
            "exit_time": exit.exit_time,
            "exit_ema_fast": exit.exit_ema_fast,
            "exit_ema_slow": exit.exit_ema_slow,
            "profit_loss": exit.profit_loss,
            "updated_at": exit.exit_time,
        }
