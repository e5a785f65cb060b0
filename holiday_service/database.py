"""SQLAlchemy async database configuration for the holiday_service.

This module builds the async engine and session factory from a database URL
and exposes a dependency provider for FastAPI endpoints. The engine is not
created at import time: :func:`app.create_app` builds it from the loaded
settings and stores the session factory on ``app.state``.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import orm
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

Base = orm.declarative_base()


def create_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for ``database_url``."""
    return create_async_engine(database_url, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Return a session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create every table registered on ``Base.metadata`` if it is missing.

    Callers must have imported :mod:`models` first.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an asynchronous database session.

    Sessions are created from the factory stored on ``app.state`` so each
    request gets its own session, closed when the response is sent.
    """
    async with request.app.state.session_factory() as session:
        yield session
