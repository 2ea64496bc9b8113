# tests/routes/test_user_routes.py
"""Tests for user profile and admin user routes."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from app.dependencies import get_user_repository
from app.errors import DuplicateEntryError, RecordNotFoundError
from app.main import app
from app.models import UserDB
from app.schemas import UserResponse


@pytest.fixture
def user_repo(sample_user: UserDB, admin_user: UserDB) -> MagicMock:
    repo = MagicMock()
    repo.update_profile = AsyncMock(side_effect=lambda user, **_: user)
    repo.list_users = AsyncMock(return_value=[admin_user, sample_user])
    repo.get_or_raise = AsyncMock(return_value=sample_user)
    repo.delete = AsyncMock(return_value=None)
    app.dependency_overrides[get_user_repository] = lambda: repo
    return repo


class TestProfile:
    """Self-service profile endpoints."""

    @pytest.mark.asyncio
    async def test_get_profile(self, client: AsyncClient, as_user: UserDB) -> None:
        response = await client.get("/api/users/profile")

        assert response.status_code == status.HTTP_200_OK
        user = response.json()["user"]
        assert user["email"] == "test@example.com"
        assert user["role"] == "user"
        assert "password_hash" not in user
        assert "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, client: AsyncClient, user_repo: MagicMock) -> None:
        response = await client.get("/api/users/profile")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "NotAuthenticatedError"

    @pytest.mark.asyncio
    async def test_update_name_only(
        self,
        client: AsyncClient,
        as_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.put("/api/users/profile", json={"name": "Renamed"})

        assert response.status_code == status.HTTP_200_OK
        kwargs = user_repo.update_profile.call_args.kwargs
        assert kwargs == {"name": "Renamed", "email": None, "password_hash": None}

    @pytest.mark.asyncio
    async def test_update_password_is_hashed(
        self,
        client: AsyncClient,
        as_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        with patch(
            "app.routes.users.hash_password",
            new=AsyncMock(return_value="hashed-value"),
        ) as hasher:
            response = await client.put(
                "/api/users/profile",
                json={"password": "a-new-password"},
            )

        assert response.status_code == status.HTTP_200_OK
        hasher.assert_awaited_once_with("a-new-password")
        assert user_repo.update_profile.call_args.kwargs["password_hash"] == "hashed-value"

    @pytest.mark.asyncio
    async def test_update_short_password(
        self,
        client: AsyncClient,
        as_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.put("/api/users/profile", json={"password": "abc"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("password: Password must be at least")
        user_repo.update_profile.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_email_taken(
        self,
        client: AsyncClient,
        as_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        user_repo.update_profile.side_effect = DuplicateEntryError("Email already in use")

        response = await client.put("/api/users/profile", json={"email": "taken@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Email already in use"


class TestAdminUsers:
    """Admin-only user management."""

    @pytest.mark.asyncio
    async def test_list_users(
        self,
        client: AsyncClient,
        as_admin: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.get("/api/users")

        assert response.status_code == status.HTTP_200_OK
        assert [u["role"] for u in response.json()["users"]] == ["admin", "user"]

    @pytest.mark.asyncio
    async def test_list_users_forbidden_for_user(
        self,
        client: AsyncClient,
        as_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.get("/api/users")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Not authorized as an admin"

    @pytest.mark.asyncio
    async def test_get_unknown_user(
        self,
        client: AsyncClient,
        as_admin: UserDB,
        user_repo: MagicMock,
    ) -> None:
        user_repo.get_or_raise.side_effect = RecordNotFoundError("User not found")

        response = await client.get(f"/api/users/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_delete_user(
        self,
        client: AsyncClient,
        as_admin: UserDB,
        sample_user: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.delete(f"/api/users/{sample_user.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "User removed"}
        user_repo.delete.assert_awaited_once_with(sample_user)

    @pytest.mark.asyncio
    async def test_cannot_delete_self(
        self,
        client: AsyncClient,
        as_admin: UserDB,
        user_repo: MagicMock,
    ) -> None:
        response = await client.delete(f"/api/users/{as_admin.id}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Cannot delete your own account"
        user_repo.delete.assert_not_called()


def test_user_timestamps_serialize_camel_case() -> None:
    now = datetime.now(tz=UTC)
    user = UserDB(
        id=uuid4(),
        name="A",
        email="a@example.com",
        password_hash="x",
        created_at=now,
        updated_at=now,
    )
    dumped = UserResponse.model_validate(user).model_dump(by_alias=True)
    assert set(dumped) == {"id", "name", "email", "role", "createdAt", "updatedAt"}
