"""
Test fixtures for the BitSplit ledger test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - locks / ledger: A LedgerService over the test session with fresh locks
  - client: Async HTTP test client (unauthenticated)
  - make_headers: Builds bearer headers for any identity
  - authenticated_client: Test client acting as ALICE with an initialized account
  - admin_client: Test client acting as an identity listed in ADMIN_IDENTITIES

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) for speed and isolation. Each test
    gets a completely fresh database.
  - get_db and get_ledger_locks are overridden so requests hit the test
    database and use locks created inside the test's event loop.
  - Tokens are minted with the same key the app verifies with, standing in
    for the external identity provider.
"""

import os

# Must be set before bitsplit.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from bitsplit.config import settings
from bitsplit.database import Base, get_db
from bitsplit.dependencies import get_ledger_locks
from bitsplit.main import app
from bitsplit.security import create_access_token
from bitsplit.services.ledger_service import LedgerService
from bitsplit.services.locks import LedgerLocks


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

ALICE = "alice-principal-7f3a"
BOB = "bob-principal-91c2"
ADMIN = "operator-principal-0001"


def bearer(identity: str) -> dict:
    token = create_access_token(data={"sub": identity})
    return {"Authorization": f"Bearer {token}"}


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
async def db_session(db_engine):
    """Provide an async session bound to the test engine."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def locks():
    return LedgerLocks()


@pytest.fixture
def ledger(db_session, locks):
    """A ledger service over the test session, with the default 50/30/20 policy."""
    return LedgerService(db_session, locks)


@pytest_asyncio.fixture
async def client(db_engine, locks):
    """
    Async HTTP test client with the test database injected.

    Overrides get_db so all requests hit the in-memory test database, and
    get_ledger_locks so every test starts with fresh locks.
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger_locks] = lambda: locks

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_headers():
    """Factory for bearer headers: make_headers("some-identity")."""
    return bearer


@pytest_asyncio.fixture
async def authenticated_client(client):
    """
    Test client acting as ALICE, whose account is already initialized.

    Initializes through the real endpoint so the fixture exercises the same
    path a dashboard takes right after login.
    """
    client.headers.update(bearer(ALICE))
    response = await client.post("/account")
    assert response.status_code == 201, f"Initialization failed: {response.text}"
    return client


@pytest_asyncio.fixture
async def admin_client(client, monkeypatch):
    """
    Test client acting as an operator-provisioned administrator.

    Admins are configured through ADMIN_IDENTITIES, not self-service.
    """
    monkeypatch.setattr(settings, "ADMIN_IDENTITIES", [ADMIN])
    client.headers.update(bearer(ADMIN))
    return client
