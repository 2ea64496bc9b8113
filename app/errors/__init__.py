from app.errors.auth import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotAuthenticatedError,
    UserAuthenticationError,
    auth_exception_handler,
)
from app.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_envelope,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    QueryTimeoutError,
    RecordNotFoundError,
    ReferenceInUseError,
    database_exception_handler,
)
from app.errors.password_hasher import PasswordHashingError, password_hashing_exception_handler
from app.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    MissingImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import (
    SelfDeletionError,
    ValidationError,
    format_validation_errors,
    http_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "InvalidTokenError",
    "MissingImageError",
    "NotAuthenticatedError",
    "PasswordHashingError",
    "QueryTimeoutError",
    "RecordNotFoundError",
    "ReferenceInUseError",
    "SelfDeletionError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "ValidationError",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_envelope",
    "format_validation_errors",
    "http_exception_handler",
    "password_hashing_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
