"""
Pytest fixtures for test database, client and authentication.

Tables are created before and dropped after every test. The database is
taken from TEST_DATABASE_URL and defaults to a throwaway SQLite file so
the suite runs without a PostgreSQL server.
"""

import os
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from lodging.main import app
from lodging.db.base import Base
from lodging.db.session import get_db
from lodging.models.user import User
from tests import factories

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_lodging.db")

# NullPool: each test runs on its own event loop, pooled connections would outlive it
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await factories.create_user(db_session)


@pytest_asyncio.fixture
async def auth_token(db_session: AsyncSession, test_user: User) -> str:
    """A token backed by a stored session for the test user."""
    return await factories.create_session(db_session, test_user)


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def eligible_user(db_session: AsyncSession, test_user: User) -> User:
    """Test user with an enrollment and a paid, in-person ticket that includes a hotel."""
    enrollment = await factories.create_enrollment(db_session, test_user)
    ticket_type = await factories.create_ticket_type(db_session, is_remote=False, includes_hotel=True)
    await factories.create_ticket(db_session, enrollment, ticket_type, status=factories.TicketStatus.PAID)
    return test_user
