"""Database connection pool and session management.

The pool is an explicit object owned by the application (``app.state.database``)
with an ``init()`` / ``close()`` lifecycle and a ``ping()`` readiness probe.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.ext.asyncio import (
    create_async_engine as sqlalchemy_create_async_engine,
)

from risk_monitor.core.config import DatabaseConfig
from risk_monitor.core.errors import PersistenceError

logger = logging.getLogger(__name__)


def create_async_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create async database engine."""
    engine = sqlalchemy_create_async_engine(
        config.async_url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {
                "timezone": "UTC",
                "search_path": f"{config.schema_name},public",
            },
            "timeout": 30,
        },
    )
    logger.info(
        "Database engine created",
        extra={
            "host": config.host,
            "port": config.port,
            "database": config.name,
        },
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class Database:
    """Connection pool with an explicit lifecycle."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise PersistenceError("Database is not initialized")
        return self._engine

    def init(self) -> None:
        """Create the engine and session factory. Idempotent."""
        if self._engine is not None:
            return
        self._engine = create_async_engine(self.config)
        self._session_factory = create_session_factory(self._engine)

    async def close(self) -> None:
        """Dispose the pool. Safe to call more than once."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

    async def ping(self) -> None:
        """Readiness probe.

        Raises:
            PersistenceError: If the store cannot be reached.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Database is not reachable", details={"error": str(exc)}
            ) from exc

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        if self._session_factory is None:
            raise PersistenceError("Database is not initialized")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
