"""
Database engines and session management.

Two credential scopes are exposed:
  - caller    — the connection subject to row-level access policy
  - elevated  — used for cross-entity writes (cache upserts, cascade deletes)

Services never reach for a global session; they receive a DBScope per call.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

elevated_engine = (
    engine
    if settings.elevated_database_url == settings.database_url
    else create_async_engine(
        settings.elevated_database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )
)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)
elevated_session_maker = async_sessionmaker(elevated_engine, expire_on_commit=False)


@dataclass
class DBScope:
    """Pair of sessions handed to services: caller-scoped reads, elevated writes."""

    caller: AsyncSession
    elevated: AsyncSession


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: caller-scoped session."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def get_elevated_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: elevated session."""
    async with elevated_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def create_task_scope() -> AsyncIterator[DBScope]:
    """
    DBScope for code running outside a request (Celery tasks).

    Each task runs in its own short-lived event loop, so pooled connections
    bound to a previous loop cannot be reused; NullPool engines are created
    and disposed per scope.
    """
    task_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    task_elevated_engine = (
        task_engine
        if settings.elevated_database_url == settings.database_url
        else create_async_engine(settings.elevated_database_url, poolclass=NullPool)
    )
    try:
        async with AsyncSession(task_engine, expire_on_commit=False) as caller, \
                AsyncSession(task_elevated_engine, expire_on_commit=False) as elevated:
            yield DBScope(caller=caller, elevated=elevated)
    finally:
        await task_engine.dispose()
        if task_elevated_engine is not task_engine:
            await task_elevated_engine.dispose()


async def init_db() -> None:
    """Create tables that do not exist yet."""
    # Import models so they register on Base.metadata
    import app.models  # noqa: F401

    async with elevated_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of connection pools."""
    await engine.dispose()
    if elevated_engine is not engine:
        await elevated_engine.dispose()
