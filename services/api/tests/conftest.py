"""Shared fixtures.

- client: httpx AsyncClient bound to the ASGI app (no lifespan, no DB)
- sqlite_db: in-memory SQLite schema; services' get_session is patched to use it
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.error_logger import reset_error_logger
from app.main import app
from app.services import medication_strategy as medication_strategy_service
from app.services import price_reports as price_reports_service
from app.stores.postgres import Base


class RecordingReporter:
    """ErrorReporter that keeps everything it receives."""

    def __init__(self):
        self.exceptions: list[tuple[BaseException, str]] = []
        self.messages: list[tuple[str, str, str]] = []
        self.user = None

    def capture_exception(self, error, *, component, extra):
        self.exceptions.append((error, component))

    def capture_message(self, message, *, level, component, extra):
        self.messages.append((message, level, component))

    def set_user(self, user):
        self.user = user


@pytest.fixture(autouse=True)
def _reset_error_logger():
    reset_error_logger()
    yield
    reset_error_logger()


@pytest.fixture
def reporter() -> RecordingReporter:
    from app.error_logger import init_error_logger

    recording = RecordingReporter()
    init_error_logger(reporter=recording)
    return recording


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def sqlite_db(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """In-memory database with all tables; yields the session factory."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def fake_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(medication_strategy_service, "get_session", fake_get_session)
    monkeypatch.setattr(price_reports_service, "get_session", fake_get_session)

    yield factory

    await engine.dispose()
