"""User repository for database operations."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.sql.expression import ColumnElement

from app.errors.database import DuplicateEntryError
from app.models.user import UserDB
from app.monitoring import get_logger
from app.repositories.base import BaseRepository

logger = get_logger(__name__)

# Transaction-scoped advisory lock serializing signups
SIGNUP_LOCK_KEY = 7_310_842_001

DUPLICATE_EMAIL_MESSAGE = "User already exists"


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    This class implements the repository pattern for User entities.
    Passwords arrive already hashed; hashing lives in the password manager.
    """

    model = UserDB
    entity = "User"

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email.

        Args:
            email: Email to search for, compared lower-cased

        Returns:
            UserDB | None: User if found, None otherwise
        """
        result = await self._execute(
            select(UserDB).where(cast(ColumnElement[bool], UserDB.email == email.lower())),
            "get_by_email",
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_id: UUID | None = None) -> bool:
        return await self._value_taken(
            "email",
            email.lower(),
            exclude_id,
        )

    async def lock_signups(self) -> None:
        """
        Serialize signups for the rest of the transaction.

        Only PostgreSQL has advisory locks; other dialects run unlocked.
        """
        bind = self.session.bind
        if bind is not None and bind.dialect.name == "postgresql":
            await self.session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": SIGNUP_LOCK_KEY},
            )

    async def create(self, name: str, email: str, password_hash: str) -> UserDB:
        """
        Create a new user; the very first user becomes an admin.

        The advisory lock makes the "no users yet" check and the insert
        atomic with respect to concurrent signups.

        Args:
            name: Display name
            email: Email address
            password_hash: Argon2 hash of the password

        Returns:
            UserDB: Created user database model

        Raises:
            DuplicateEntryError: If the email already exists
        """
        await self.lock_signups()
        if await self.email_taken(email):
            raise DuplicateEntryError(detail=DUPLICATE_EMAIL_MESSAGE)

        role = "admin" if await self.count() == 0 else "user"
        db_user = UserDB(
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
        )
        user = await self._save(db_user, duplicate_message=DUPLICATE_EMAIL_MESSAGE)
        if role == "admin":
            logger.info(f"First user registered as admin: {user.id}")
        return user

    async def list_users(self) -> list[UserDB]:
        # pyrefly: ignore [missing-attribute]
        return await self.get_all(UserDB.created_at.desc())

    async def update_profile(
        self,
        user: UserDB,
        *,
        name: str | None = None,
        email: str | None = None,
        password_hash: str | None = None,
    ) -> UserDB:
        """
        Update user information.

        Args:
            user: Loaded user
            name: New display name
            email: New email address
            password_hash: Hash of a new password

        Returns:
            UserDB: Updated user

        Raises:
            DuplicateEntryError: If email already exists for another user
        """
        if email is not None and email.lower() != user.email:
            if await self.email_taken(email, exclude_id=user.id):
                raise DuplicateEntryError(detail="Email already in use")
            user.email = email.lower()
        if name is not None:
            user.name = name
        if password_hash is not None:
            user.password_hash = password_hash

        user.updated_at = datetime.now(tz=UTC)
        return await self._save(user, duplicate_message="Email already in use")
