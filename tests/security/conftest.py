"""
Security test fixtures.

These fixtures enable testing security scenarios like IDOR (Insecure Direct
Object Reference) by creating multiple users and their associated data. Clients
authenticate with real bearer tokens so the full auth dependency runs.
"""
from collections.abc import AsyncGenerator

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.bookmark import Bookmark
from models.user import User
from services.token_service import create_access_token
from tests.conftest import create_test_user, make_client


@pytest.fixture
async def user_a(db_session: AsyncSession) -> User:
    """Create the first test user (User A)."""
    return await create_test_user(db_session, email="user-a@test.com", name="User A")


@pytest.fixture
async def user_b(db_session: AsyncSession) -> User:
    """Create a second test user (User B) for IDOR testing."""
    return await create_test_user(db_session, email="user-b@test.com", name="User B")


@pytest.fixture
async def user_a_bookmark(db_session: AsyncSession, user_a: User) -> Bookmark:
    """Create a bookmark belonging to User A."""
    bookmark = Bookmark(
        user_id=user_a.id,
        link="https://user-a-bookmark.example.com/",
        title="User A's Private Bookmark",
        description="This should only be accessible to User A",
    )
    db_session.add(bookmark)
    await db_session.flush()
    await db_session.refresh(bookmark)
    return bookmark


@pytest.fixture
async def client_as_user_a(
    db_session: AsyncSession,
    user_a: User,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client authenticated as User A."""
    token = create_access_token(settings, user_a.id, user_a.email)
    async with make_client(db_session, token) as test_client:
        yield test_client


@pytest.fixture
async def client_as_user_b(
    db_session: AsyncSession,
    user_b: User,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client authenticated as User B."""
    token = create_access_token(settings, user_b.id, user_b.email)
    async with make_client(db_session, token) as test_client:
        yield test_client
