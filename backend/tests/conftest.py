"""
Cursebreakers Backend - Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock database session for service unit tests
    ├── db_engine:       Async SQLite engine on a fresh file with all tables
    ├── test_app:        App instance whose get_db_session uses db_engine
    ├── test_client:     HTTPX AsyncClient bound to test_app
    └── register_user:   Helper that registers an account and returns its token
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./cursebreakers_test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-use-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt's minimum cost, keeps hashing fast
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cursebreakers.database import build_engine, create_all, get_db_session
from cursebreakers.main import create_app

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_login(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            result = await auth_service.login(mock_db_session, email, password)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database per test, created from the ORM metadata."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def test_app(session_factory):
    """
    App instance with get_db_session pointed at the per-test database.

    The override keeps the production dependency's commit/rollback
    behaviour so a failed request leaves no partial writes.
    """
    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient that routes requests directly to the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client) -> Callable[..., Awaitable[str]]:
    """
    Registers an account through the API and returns its bearer token.

    Usage:
        token = await register_user("alice")
    """

    async def _register(username: str, email: str = None, password: str = DEFAULT_PASSWORD) -> str:
        response = await test_client.post(
            "/auth/new",
            json={
                "username": username,
                "email": email or f"{username.lower()}@example.com",
                "password": password,
                "confirmPassword": password,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["token"]

    return _register
