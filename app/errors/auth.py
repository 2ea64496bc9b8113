"""Authentication errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)
        if status_code == HTTP_401_UNAUTHORIZED:
            self.headers = {"WWW-Authenticate": "Bearer"}


class NotAuthenticatedError(UserAuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self) -> None:
        super().__init__("Not authorized, no token")


class InvalidTokenError(UserAuthenticationError):
    """Raised when the bearer token cannot be verified."""

    def __init__(self, detail: str = "Not authorized, token failed") -> None:
        super().__init__(detail)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when credentials are invalid."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", HTTP_401_UNAUTHORIZED)


class ForbiddenError(UserAuthenticationError):
    """Raised when an authenticated user lacks the required role."""

    def __init__(self, detail: str = "Not authorized as an admin") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
