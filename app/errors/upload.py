"""
Upload-related error classes.

This module defines custom exceptions for blog image uploads,
covering request validation and asset provider failures.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_502_BAD_GATEWAY,
)

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UploadError(BaseAppError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        detail: str = "We couldn't upload your file. Please try again.",
        status_code: int = HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class MissingImageError(UploadError):
    """Exception raised when a blog is created without an image."""

    def __init__(self) -> None:
        super().__init__(detail="Blog image is required")


class ImageTooLargeError(UploadError):
    """Exception raised when uploaded image exceeds size limit."""

    def __init__(
        self,
        max_size_mb: int = 25,
        actual_size_mb: float | None = None,
    ) -> None:
        detail = f"File size too large. Max size is {max_size_mb}MB."
        if actual_size_mb is not None:
            detail += f" Your file is {actual_size_mb:.1f}MB."
        super().__init__(detail=detail)
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """Exception raised when uploaded image type is not supported."""

    def __init__(
        self,
        content_type: str,
        allowed_types: list[str] | None = None,
    ) -> None:
        detail = "Only image files (jpeg, jpg, png, gif, bmp, tiff, webp) are allowed."
        super().__init__(detail=detail)
        self.content_type = content_type
        self.allowed_types = allowed_types or []


class InvalidImageError(UploadError):
    """Exception raised when uploaded file is not a valid image."""

    def __init__(
        self,
        detail: str = "This file doesn't appear to be a valid image. Please try a different file.",
    ) -> None:
        super().__init__(detail=detail)


class StorageError(UploadError):
    """Exception raised when the asset provider rejects or fails an operation."""

    def __init__(self, detail: str = "We couldn't save your file. Please try again later.") -> None:
        super().__init__(detail=detail, status_code=HTTP_502_BAD_GATEWAY)


upload_exception_handler = create_exception_handler(logger)
