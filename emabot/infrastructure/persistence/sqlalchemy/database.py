"""Async engine and session factory for the position store."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from emabot.config import Settings

from .models import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_dsn``.

    No connection is made until first use.
    """
    dsn = settings.database_dsn
    options: dict = {"echo": settings.db_echo, "pool_pre_ping": True}
    if make_url(dsn).get_backend_name() != "sqlite":
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_pool_size)
    return create_async_engine(dsn, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Create tables and indexes that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
