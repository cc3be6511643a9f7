"""SQLAlchemy persistence layer."""

from .models import Base, PositionModel
from .repositories import SQLAlchemyPositionRepository
from .unit_of_work import SQLAlchemyUnitOfWork, create_unit_of_work
from .database import create_engine, create_session_factory, init_models

__all__ = [
    # ORM Models
    "Base",
    "PositionModel",
    # Repositories
    "SQLAlchemyPositionRepository",
    # Unit of Work
    "SQLAlchemyUnitOfWork",
    "create_unit_of_work",
    # Engine
    "create_engine",
    "create_session_factory",
    "init_models",
]
