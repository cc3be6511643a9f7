"""Repository interfaces (ports) for the Trading bounded context."""

from .position_repository import PositionRepository

__all__ = ["PositionRepository"]
