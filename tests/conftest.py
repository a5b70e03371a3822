"""Shared fixtures: a throwaway SQLite schema per test and an ASGI client."""

import os
from typing import AsyncGenerator

# Must be set before storefront.core.config is imported anywhere
os.environ.setdefault("STOREFRONT_ENVIRONMENT", "testing")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.domain.services import AuthService
from storefront.infrastructure.persistence import models  # noqa: F401
from storefront.infrastructure.persistence.database import Base, get_db_session


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    # StaticPool keeps every checkout on the one in-memory connection
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    sessions = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    try:
        async with sessions() as session:
            yield session
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def auth_service(db_session: AsyncSession) -> AuthService:
    """Auth service with refresh-token rotation enabled."""
    return AuthService(db_session, rotate_refresh_tokens=True)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, sharing the test's database session."""
    from storefront.infrastructure.api.app import app

    app.dependency_overrides[get_db_session] = lambda: db_session
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as http:
            yield http
    finally:
        app.dependency_overrides.clear()
