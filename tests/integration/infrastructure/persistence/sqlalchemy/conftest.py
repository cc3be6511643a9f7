"""Pytest fixtures for SQLAlchemy integration tests."""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from emabot.infrastructure.persistence.sqlalchemy import (
    Base,
    SQLAlchemyUnitOfWork,
    create_session_factory,
)


@pytest.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    """Session rolled back after each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def uow(session_factory):
    return SQLAlchemyUnitOfWork(session_factory)
