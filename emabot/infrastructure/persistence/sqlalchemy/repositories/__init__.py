"""SQLAlchemy repository implementations."""

from .position_repository import SQLAlchemyPositionRepository

__all__ = ["SQLAlchemyPositionRepository"]
