"""Authentication service handling signup and password login."""

from app.errors.auth import InvalidCredentialsError
from app.managers.password_manager import hash_password, verify_password
from app.managers.token_manager import create_access_token
from app.models import UserDB
from app.repositories import UserRepository
from app.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserPublic


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    @staticmethod
    def _response(user: UserDB) -> AuthResponse:
        return AuthResponse(
            success=True,
            user=UserPublic.model_validate(user),
            token=create_access_token(user.id),
        )

    async def signup(self, data: SignupRequest) -> AuthResponse:
        """
        Register a user and issue a token.

        The first user ever registered becomes an admin.

        Args:
            data: Validated signup payload

        Returns:
            AuthResponse: The new user and an access token

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        password_hash = await hash_password(data.password.get_secret_value())
        user = await self.user_repo.create(
            name=data.name,
            email=data.email,
            password_hash=password_hash,
        )
        return self._response(user)

    async def authenticate_user(self, email: str, password: str) -> UserDB:
        """
        Authenticate a user by email and password.

        Args:
            email: User email
            password: User password

        Returns:
            UserDB: Authenticated user

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = await self.user_repo.get_by_email(email)
        # Unknown emails still pay for a verification
        valid = await verify_password(password, user.password_hash if user else None)
        if not user or not valid:
            raise InvalidCredentialsError
        return user

    async def login(self, data: LoginRequest) -> AuthResponse:
        user = await self.authenticate_user(data.email, data.password.get_secret_value())
        return self._response(user)
