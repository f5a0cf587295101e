"""Tests for user profile endpoints."""
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from tests.conftest import TEST_PASSWORD, create_test_user


async def test_get_me_returns_current_user(client: AsyncClient, test_user: User) -> None:
    """Test that /users/me returns the authenticated user's profile."""
    response = await client.get("/users/me")

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == str(test_user.id)
    assert user["email"] == "user@example.com"
    assert user["name"] == "Test User"
    assert "password_hash" not in user


async def test_get_me_without_token_returns_401(anon_client: AsyncClient) -> None:
    """Test that /users/me returns 401 when no token is provided."""
    response = await anon_client.get("/users/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_edit_user_changes_name(client: AsyncClient) -> None:
    """Test that editing only the name leaves the email unchanged."""
    response = await client.patch("/users/edit", json={"name": "New Name"})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "New Name"
    assert user["email"] == "user@example.com"


async def test_edit_user_changes_email(client: AsyncClient) -> None:
    """Test that a new email is normalized and persisted."""
    response = await client.patch("/users/edit", json={"email": "Renamed@Example.com"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "renamed@example.com"

    me = await client.get("/users/me")
    assert me.json()["user"]["email"] == "renamed@example.com"


async def test_edit_user_password_allows_signin_with_new_password(
    client: AsyncClient,
    anon_client: AsyncClient,
) -> None:
    """Test that a changed password replaces the old one."""
    response = await client.patch("/users/edit", json={"password": "a-new-password"})
    assert response.status_code == 200
    assert "a-new-password" not in response.text

    old = await anon_client.post(
        "/auth/signin", json={"email": "user@example.com", "password": TEST_PASSWORD},
    )
    new = await anon_client.post(
        "/auth/signin", json={"email": "user@example.com", "password": "a-new-password"},
    )
    assert old.status_code == 403
    assert new.status_code == 200


async def test_edit_user_empty_body_is_noop(client: AsyncClient) -> None:
    """Test that an empty edit returns the unchanged profile."""
    response = await client.patch("/users/edit", json={})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Test User"
    assert user["email"] == "user@example.com"


async def test_edit_user_null_values_are_ignored(client: AsyncClient) -> None:
    """Test that null fields do not clear the stored values."""
    response = await client.patch("/users/edit", json={"name": None, "email": None})

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Test User"


async def test_edit_user_blank_name_returns_422(client: AsyncClient) -> None:
    """Test that a whitespace-only name is rejected rather than stored."""
    response = await client.patch("/users/edit", json={"name": "   "})

    assert response.status_code == 422

    me = await client.get("/users/me")
    assert me.json()["user"]["name"] == "Test User"


async def test_edit_user_strips_name(client: AsyncClient) -> None:
    """Test that surrounding whitespace is removed from a new name."""
    response = await client.patch("/users/edit", json={"name": "  Padded  "})

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Padded"


async def test_edit_user_email_taken_returns_403(
    client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Test that changing to another account's email is rejected."""
    await create_test_user(db_session, email="taken@example.com", name="Other")

    response = await client.patch("/users/edit", json={"email": "TAKEN@example.com"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Email already exists"


async def test_edit_user_invalid_email_returns_422(client: AsyncClient) -> None:
    """Test that a malformed email fails validation."""
    response = await client.patch("/users/edit", json={"email": "nope"})

    assert response.status_code == 422


async def test_edit_user_without_token_returns_401(anon_client: AsyncClient) -> None:
    """Test that /users/edit requires authentication."""
    response = await anon_client.patch("/users/edit", json={"name": "x"})

    assert response.status_code == 401
