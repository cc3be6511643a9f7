"""Trading DTOs."""

from .position_dto import PositionDTO
from .tick_result import TickOutcome, TickResult

__all__ = ["PositionDTO", "TickOutcome", "TickResult"]
