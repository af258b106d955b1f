from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from leavedesk.config import get_settings
from leavedesk.exceptions import StoreFailureError

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the singleton async engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the singleton async session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            expire_on_commit=False,
        )
    return _session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an async database session.

    Anything not committed by the service layer is rolled back when the
    session closes, so a failed operation leaves no partial writes behind.
    """
    factory = get_session_factory()
    async with factory() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


@asynccontextmanager
async def store_errors() -> AsyncIterator[None]:
    """Re-raise persistence errors from the wrapped block as StoreFailureError.

    Usable as a decorator on service operations, so direct callers see the
    same typed error as HTTP clients.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store operation failed")
        raise StoreFailureError() from exc


async def commit_or_raise(session: AsyncSession) -> None:
    """Commit the session, surfacing persistence errors as StoreFailureError."""
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        logger.exception("Commit failed")
        await session.rollback()
        raise StoreFailureError("Could not save changes, please try again") from exc


async def dispose_engine() -> None:
    """Dispose the engine and reset singletons. Call on app shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
