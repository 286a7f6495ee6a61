"""
Database Configuration

Async SQLAlchemy engine and session management.

The storage handle is an explicitly constructed ``Database`` object. The
application lifespan owns its ``connect()`` / ``dispose()`` lifecycle and
request handlers receive sessions through the ``get_db`` dependency, so
tests can build their own handle against any URL.
"""

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ships with foreign keys (and so ON DELETE CASCADE) disabled
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage handle wrapping an async engine and its session factory.

    Usage:
        database = Database(settings.database_url)
        await database.connect()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """Create the engine and session factory (idempotent)."""
        if self._engine is not None:
            return

        engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._engine = engine
        self._session_maker = async_sessionmaker(engine, expire_on_commit=False)
        logger.info(f"Database engine created ({engine.dialect.name})")

    def session(self) -> AsyncSession:
        """Open a new session. Use as an async context manager."""
        if self._session_maker is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._session_maker()

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def create_all(self) -> None:
        """Create every table known to ``Base`` (tests and local bootstrap)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_maker = None


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency yielding a session bound to the application's database.

    Services commit explicitly; anything left uncommitted is rolled back when
    the session closes.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
