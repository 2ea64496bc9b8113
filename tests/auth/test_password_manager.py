# tests/auth/test_password_manager.py
"""Tests for app/managers/password_manager.py module."""

import pytest

from app.errors import PasswordHashingError
from app.managers.password_manager import PasswordHasher, hash_password, verify_password


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(level="low")


class TestPasswordHasher:
    """Argon2id hashing."""

    def test_hash_and_verify(self, hasher: PasswordHasher) -> None:
        """Test a hash verifies only its own password."""
        hashed = hasher.hash("s3cret-pass")

        assert hashed.startswith("$argon2id$")
        assert hasher.verify("s3cret-pass", hashed) is True
        assert hasher.verify("wrong-pass", hashed) is False

    def test_hashes_are_salted(self, hasher: PasswordHasher) -> None:
        """Test hashing twice gives different hashes."""
        assert hasher.hash("same") != hasher.hash("same")

    def test_empty_password(self, hasher: PasswordHasher) -> None:
        """Test empty passwords cannot be hashed."""
        with pytest.raises(ValueError, match="cannot be empty"):
            hasher.hash("")

    def test_missing_hash(self, hasher: PasswordHasher) -> None:
        """Test unknown accounts never verify."""
        assert hasher.verify("anything", None) is False

    def test_corrupt_hash(self, hasher: PasswordHasher) -> None:
        """Test a malformed stored hash fails verification instead of raising."""
        assert hasher.verify("anything", "$argon2id$garbage") is False

    def test_backend_failure(self, hasher: PasswordHasher) -> None:
        """Test backend errors become PasswordHashingError."""

        def broken(_: str) -> str:
            mssg = "bad"
            raise ValueError(mssg)

        hasher.pwd_context.hash = broken  # type: ignore[method-assign]
        with pytest.raises(PasswordHashingError):
            hasher.hash("s3cret-pass")


@pytest.mark.asyncio
async def test_async_helpers_round_trip() -> None:
    """Test the thread-pool helpers hash and verify."""
    hashed = await hash_password("s3cret-pass")
    assert await verify_password("s3cret-pass", hashed) is True
    assert await verify_password("nope", hashed) is False
