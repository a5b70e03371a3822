"""Async engine and session handling for the credential store.

SQLite (aiosqlite) is the default backend; PostgreSQL (asyncpg) is used
when ``STOREFRONT_DATABASE_URL`` points at it. One ``AsyncSession`` is
handed out per request and never shared between requests.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    """Timezone-aware current time used for timestamp columns."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base shared by the accounts and oauth_links models."""


def _engine_options(settings: Settings) -> dict[str, Any]:
    if not settings.uses_sqlite:
        return {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_recycle": settings.db_pool_recycle,
        }

    database_url = settings.database_url
    if ":memory:" not in database_url:
        Path(database_url.split(":///", 1)[-1]).parent.mkdir(parents=True, exist_ok=True)
    return {"connect_args": {"check_same_thread": False}}


class DatabaseManager:
    """Owns the async engine and the session factory.

    Both are built on first use and dropped by ``disconnect()``; the next use
    builds them again.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                **_engine_options(self.settings),
            )
            logger.info(
                "Opened database engine",
                database_url=engine.url.render_as_string(hide_password=True),
            )
            self._engine = engine
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        # Profiles are read from models after commit, so nothing is expired
        if self._sessions is None:
            self._sessions = async_sessionmaker(
                self.engine, expire_on_commit=False, autoflush=False
            )
        return self._sessions

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session, rolling back if the block raises.

        Committing is left to the caller; AuthService commits each
        operation itself.
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create the accounts and oauth_links tables if missing."""
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("Created missing tables", tables=sorted(Base.metadata.tables))

    async def check_connection(self) -> bool:
        try:
            async with self.engine.connect() as connection:
                await connection.scalar(text("SELECT 1"))
        except Exception as exc:
            logger.error("Database is unreachable", error_type=type(exc).__name__)
            return False
        return True

    async def disconnect(self) -> None:
        engine, self._engine, self._sessions = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.info("Closed database engine")


_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Return the process-wide database manager, creating it on first call."""
    global _manager
    if _manager is None:
        _manager = DatabaseManager()
    return _manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Verify connectivity at startup and create tables in development.

    Other environments are expected to run ``alembic upgrade head``.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Registers the models on Base.metadata
    from storefront.infrastructure.persistence import models  # noqa: F401

    manager = get_db_manager()
    if not await manager.check_connection():
        raise RuntimeError(f"Cannot connect to {manager.engine.url.render_as_string()}")

    if manager.settings.is_development:
        await manager.create_tables()
    else:
        logger.info("Leaving schema to alembic", environment=manager.settings.environment)


async def close_database() -> None:
    await get_db_manager().disconnect()
