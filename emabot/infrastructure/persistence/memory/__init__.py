"""In-memory position store used in dry-run mode."""

from .position_repository import InMemoryPositionRepository, InMemoryPositionStorage
from .unit_of_work import InMemoryUnitOfWork

__all__ = ["InMemoryPositionStorage", "InMemoryPositionRepository", "InMemoryUnitOfWork"]
