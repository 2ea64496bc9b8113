from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from app.configs import settings
from app.utils.helpers import host

# Attributes that never leak into the response body
_RESERVED_ATTRS = frozenset({"status_code", "detail", "error", "headers"})


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        error: str | None = None,
    ) -> None:
        self.detail = detail
        self.status_code = status_code
        self.error = error or type(self).__name__
        self.headers: dict[str, str] | None = None

    def __str__(self) -> str:
        return self.detail


def error_envelope(message: str, error: str, **extra: Any) -> dict[str, Any]:
    """Build the uniform error body ``{success, message, error}``."""
    return {"success": False, "message": message, "error": error, **extra}


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Default values
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = "Internal Server Error"
        error = type(exc).__name__

        # Extract from custom exception if available
        if hasattr(exc, "status_code"):
            status_code = exc.status_code
        if hasattr(exc, "detail"):
            detail = exc.detail
        if hasattr(exc, "error"):
            error = exc.error

        if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")
            if settings.is_production:
                error = "Internal Server Error"
                # 502 and 504 keep their advice; a bare 500 says nothing more
                if status_code == HTTP_500_INTERNAL_SERVER_ERROR:
                    detail = "Internal Server Error"
        else:
            logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Any additional exception attributes travel with the envelope
        extra = {k: v for k, v in exc.__dict__.items() if k not in _RESERVED_ATTRS}

        return ORJSONResponse(
            content=error_envelope(detail, error, **extra),
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )

    return handler


def create_unhandled_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create the catch-all handler for exceptions nothing else claimed.

    The exception text is exposed in ``error`` only outside production.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(
            f"Unhandled error for ip: {host(request)} for endpoint {request.url.path}",
            exc_info=exc,
        )
        error = "Internal Server Error" if settings.is_production else str(exc)
        return ORJSONResponse(
            content=error_envelope("Internal Server Error", error),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler
