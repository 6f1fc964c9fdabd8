"""
Test fixtures for the Artisan Auth test suite.

This module provides shared fixtures used across all test files:

  - db_engine / session_factory / db_session: Fresh in-memory SQLite database per test
  - client: Async HTTP test client (unauthenticated)
  - authenticated_client: Test client with a pre-registered account and JWT
  - token_issuer: The TokenIssuer the application signs with

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
    Each test gets a completely fresh database — no state leaks between tests.
  - We override FastAPI's get_db dependency to inject our test session,
    so the application code works exactly as it does in production.
  - The authenticated_client fixture creates an account via the signup
    endpoint, so it exercises the real signup flow.
"""

import os

# Settings are read once at import time, so these must be set first
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from artisan_auth.database import Base, get_db
from artisan_auth.main import app


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

SIGNUP_PAYLOAD = {
    "email": "testuser@example.com",
    "password": "secret1",
    "firstName": "Test",
    "lastName": "User",
}


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


def session_override(session_factory):
    """Build a get_db replacement that opens sessions on the test engine."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """

    app.dependency_overrides[get_db] = session_override(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client):
    """
    Test client with a pre-registered account and JWT token.

    Signs up via the real endpoint, then sets the Authorization header on
    the client for all subsequent requests.
    """
    response = await client.post("/auth/signup", json=SIGNUP_PAYLOAD)
    assert response.status_code == 201, f"Signup failed: {response.text}"
    token = response.json()["data"]["token"]
    client.headers["Authorization"] = f"Bearer {token}"
    return client


@pytest.fixture
def token_issuer():
    return app.state.token_issuer
