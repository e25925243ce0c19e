"""PostgreSQL store with async SQLAlchemy.

Handles:
- Engine lifecycle (init, connectivity check, dispose)
- Session management (commit on success, rollback on error)
- Schema helpers for development and tests

init_db() takes an optional URL; tests pass an in-memory SQLite URL, which
runs without the Postgres pool settings.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.settings import get_settings


class Base(DeclarativeBase):
    """Base class for MedNav models."""

    pass


# Engine and session factory (initialized on startup)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    settings = get_settings()
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {
        "connect_args": settings.asyncpg_connect_args,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def init_db(database_url: str | None = None) -> None:
    """Create the engine and session factory.

    Args:
        database_url: Overrides settings.async_database_url.
    """
    global _engine, _session_factory

    settings = get_settings()
    url = database_url or settings.async_database_url
    _engine = create_async_engine(url, echo=settings.debug, **_engine_options(url))
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def ping_db() -> None:
    """Run a trivial query to verify connectivity."""
    async with _require_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose of the engine; safe to call when not initialized."""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on exit and rolls back on error.

    Usage:
        async with get_session() as session:
            session.add(report)
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables (for development/testing only)."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all tables (for testing only)."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
