"""SQLAlchemy ORM models."""

from .base import Base
from .position_model import PositionModel

__all__ = ["Base", "PositionModel"]
