"""Pytest configuration for all tests."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notekeep.infrastructure.auth import JWTService
from notekeep.infrastructure.persistence import models  # noqa: F401
from notekeep.infrastructure.persistence.database import Base

# base64 of b"test-signing-key-for-notekeep-unit-tests"
TEST_SECRET_BASE64 = "dGVzdC1zaWduaW5nLWtleS1mb3Itbm90ZWtlZXAtdW5pdC10ZXN0cw=="
TEST_SIGNING_KEY = b"test-signing-key-for-notekeep-unit-tests"


class FakeClock:
    """Manually advanced UTC clock for token expiry tests."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def jwt_service(clock: FakeClock) -> JWTService:
    """JWT service driven by the fake clock."""
    return JWTService(TEST_SIGNING_KEY, clock=clock)


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from notekeep.infrastructure.api.app import app
    from notekeep.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def file_session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a SQLite file, one pooled connection per session.

    Unlike ``session_factory``, sessions from here run in independent
    transactions, as they do behind the real ``get_db_session``.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'notekeep.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def per_request_client(
    file_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Test client that opens a fresh database session for every request."""
    from notekeep.infrastructure.api.app import app
    from notekeep.infrastructure.persistence.database import get_db_session

    async def session_per_request() -> AsyncGenerator[AsyncSession, None]:
        async with file_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = session_per_request

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
