"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# Settings are read at import time by db.session and api.main, so the
# environment must be populated before any app module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-chars")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import Settings, get_settings  # noqa: E402
from core.passwords import hash_password  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402
from services.token_service import create_access_token  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery-staple"


@pytest.fixture
def settings() -> Settings:
    """Settings instance shared with the app under test."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory SQLite engine with the schema for each test.

    pysqlite's own transaction handling breaks SAVEPOINT; the event hooks hand
    BEGIN back to SQLAlchemy so nested transactions behave as on PostgreSQL.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _record) -> None:  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn) -> None:  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    This provides test isolation - each test runs in its own transaction
    that is rolled back, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session bound to the test transaction.

    Uses savepoints, allowing the session's flush/commit to work within our
    outer test transaction.
    """
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


async def create_test_user(
    db_session: AsyncSession,
    email: str = "user@example.com",
    name: str = "Test User",
    password: str = TEST_PASSWORD,
) -> User:
    """Insert a user directly (bypassing the sign-up endpoint)."""
    user = User(email=email, name=name, password_hash=hash_password(password))
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """The primary authenticated user for API tests."""
    return await create_test_user(db_session)


@asynccontextmanager
async def make_client(
    db_session: AsyncSession,
    token: str | None = None,
) -> AsyncGenerator[AsyncClient]:
    """
    Create an AsyncClient against the app with the test session injected.

    If a token is given it is sent as a bearer token on every request.
    """
    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    # Clients may be nested (e.g. a second user's client inside a test), so
    # restore whatever override was active rather than clearing all of them.
    previous = app.dependency_overrides.get(get_async_session)
    app.dependency_overrides[get_async_session] = override_get_async_session
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=headers,
        ) as test_client:
            yield test_client
    finally:
        if previous is None:
            app.dependency_overrides.pop(get_async_session, None)
        else:
            app.dependency_overrides[get_async_session] = previous


@pytest.fixture
async def anon_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Client without credentials."""
    async with make_client(db_session) as test_client:
        yield test_client


@pytest.fixture
async def client(
    db_session: AsyncSession,
    test_user: User,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as test_user."""
    token = create_access_token(settings, test_user.id, test_user.email)
    async with make_client(db_session, token) as test_client:
        yield test_client
