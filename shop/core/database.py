"""
Async SQLAlchemy engine and session management.

Usage:
    # Initialize once at application startup (in lifespan)
    await AsyncDBPool.init(database_config)

    # Use in services and scripts
    async with AsyncDBPool.get_session() as session:
        repo = ProductRepository(session, storage)
        product = await repo.create_product({"name": "Shoe", ...})
        await session.commit()

    # Cleanup at shutdown (in lifespan)
    await AsyncDBPool.dispose()

SQLite URLs (handy for local runs) skip the pool sizing arguments, which the
SQLite dialect does not accept, and get foreign key enforcement plus
SAVEPOINT-safe transactions from ``configure_sqlite``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shop.main_config import DatabaseConfig


def configure_sqlite(engine: AsyncEngine) -> None:
    """Enforce foreign keys and let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver delays BEGIN until the first DML statement, which
    makes SAVEPOINT (``Session.begin_nested``) release into autocommit.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


class AsyncDBPool:
    """Async-only SQLAlchemy engine + session manager."""

    _engine: AsyncEngine | None = None
    _maker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    async def init(cls, config: DatabaseConfig) -> None:
        """Initialize async engine and sessionmaker.

        Args:
            config: DatabaseConfig instance with credentials and pool settings
        """
        if cls._engine is not None:
            return  # already initialized

        if config.is_sqlite:
            cls._engine = create_async_engine(config.url, echo=config.echo)
            configure_sqlite(cls._engine)
        else:
            cls._engine = create_async_engine(
                config.url,
                pool_size=config.pool_size,
                max_overflow=config.max_overflow,
                pool_timeout=config.pool_timeout,
                pool_recycle=config.pool_recycle,
                pool_pre_ping=config.pool_pre_ping,
                echo=config.echo,
            )
        cls._maker = async_sessionmaker(cls._engine, expire_on_commit=False, class_=AsyncSession)

    @classmethod
    async def create_all(cls, metadata: MetaData) -> None:
        """Create every table of ``metadata`` that does not exist yet."""
        if cls._engine is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")
        async with cls._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    @classmethod
    async def dispose(cls) -> None:
        """Dispose engine and clear session maker."""
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._maker = None

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncIterator[AsyncSession]:
        """Yield a session; rollback on exceptions.

        Raises:
            RuntimeError: If pool not initialized
        """
        if cls._maker is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")

        async with cls._maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
