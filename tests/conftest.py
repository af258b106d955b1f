from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from leavedesk.db import get_session
from leavedesk.main import app
from leavedesk.models import SQLModel
from leavedesk.services.account import InMemoryAccountDirectory, set_account_directory
from leavedesk.services.invalidation import InMemoryViewInvalidator, set_view_invalidator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create an in-memory database with all tables for a single test."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session wrapped in a transaction that rolls back after each test."""
    async with engine.connect() as conn:
        txn = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        yield session
        await session.close()
        if txn.is_active:
            await txn.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def accounts() -> Iterator[InMemoryAccountDirectory]:
    """Fresh in-memory account directory installed for the test."""
    directory = InMemoryAccountDirectory()
    set_account_directory(directory)
    yield directory
    set_account_directory(InMemoryAccountDirectory())


@pytest.fixture(autouse=True)
def view_invalidator() -> Iterator[InMemoryViewInvalidator]:
    """Fresh recording view invalidator for every test."""
    invalidator = InMemoryViewInvalidator()
    set_view_invalidator(invalidator)
    yield invalidator
    set_view_invalidator(InMemoryViewInvalidator())
