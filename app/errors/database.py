from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_504_GATEWAY_TIMEOUT,
)

from app.configs.settings import STORE_TIMEOUT_MESSAGE
from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ReferenceInUseError(DatabaseError):
    """Exception raised when deleting a record that blogs still reference."""

    def __init__(self, entity: str, blogs_count: int) -> None:
        plural = "blog is" if blogs_count == 1 else "blogs are"
        super().__init__(
            f"Cannot delete this {entity}. {blogs_count} {plural} using it.",
            HTTP_400_BAD_REQUEST,
        )
        self.blogsCount = blogs_count  # noqa: N815


class QueryTimeoutError(DatabaseError):
    """Exception raised when the store aborts a statement on its time bound."""

    def __init__(self, detail: str = STORE_TIMEOUT_MESSAGE) -> None:
        super().__init__(detail, HTTP_504_GATEWAY_TIMEOUT)


database_exception_handler = create_exception_handler(logger)
