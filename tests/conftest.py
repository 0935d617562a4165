"""Pytest configuration for all tests."""

import os

os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from acquisitions.core.config import Settings
from acquisitions.infrastructure.auth import JWTService, SessionCookieManager
from acquisitions.infrastructure.persistence.database import Base
from acquisitions.infrastructure.persistence.models import UserModel  # noqa: F401


@pytest.fixture
def settings() -> Settings:
    """Settings for the testing environment."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret-key-not-for-production",
    )


@pytest.fixture
def jwt_service(settings: Settings) -> JWTService:
    return JWTService.from_settings(settings)


@pytest.fixture
def cookie_manager(settings: Settings) -> SessionCookieManager:
    return SessionCookieManager(settings)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from acquisitions.infrastructure.api.app import app
    from acquisitions.infrastructure.persistence.database import get_db_session

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
