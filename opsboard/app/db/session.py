"""
Database session configuration.

The engine and session factory are built once at application start and
attached to ``app.state``; request handlers receive sessions through the
``get_db`` dependency.
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from opsboard.app.core.config import Settings

# Create declarative base for models
Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    engine_kwargs = {"echo": settings.db_echo, "future": True}
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_max_overflow
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(settings.database_url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def get_db(request: Request):
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
