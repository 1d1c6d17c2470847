"""Database dependency injection for FastAPI.

Provides the async session used by every request, plus startup and
shutdown helpers for the engine.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_credential_store_engine
from infrastructure.database.models import Base
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

# Module-level engine and sessionmaker (created on first use)
_write_engine: AsyncEngine | None = None
_write_sessionmaker: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_write_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Uses double-check locking for thread-safe initialization and creates
    the sessionmaker alongside the engine.
    """
    global _write_engine, _write_sessionmaker
    if _write_engine is None:
        with _engine_lock:
            if _write_engine is None:
                settings = get_database_settings()
                _write_engine = create_credential_store_engine(settings)
                _write_sessionmaker = async_sessionmaker(
                    _write_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_max_connections,
                )
    return _write_engine


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for the current request (FastAPI dependency).

    The session does NOT auto-commit. Services own their transactions
    with ``async with session.begin()``.
    """
    get_write_engine()
    assert _write_sessionmaker is not None

    async with _write_sessionmaker() as session:
        yield session


async def init_schema() -> None:
    """Create any missing tables for the ORM models imported so far.

    Callers import the bounded contexts' model modules first so their
    tables are registered on ``Base.metadata``.
    """
    engine = get_write_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    _probe.schema_created(table_count=len(Base.metadata.tables))


async def close_database_connections() -> None:
    """Dispose the engine on application shutdown.

    Resets the sessionmaker so that a later call reinitializes both.
    """
    global _write_engine, _write_sessionmaker

    if _write_engine is not None:
        await _write_engine.dispose()
        _probe.pool_closed()
        _write_engine = None
        _write_sessionmaker = None
