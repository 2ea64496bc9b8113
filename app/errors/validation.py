"""Custom validation error handling for FastAPI."""

from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from app.errors.base import BaseAppError, error_envelope
from app.monitoring import get_logger
from app.utils.helpers import host

logger = get_logger(__name__)

# Location prefixes that carry no meaning for API clients
_LOCATION_ROOTS = frozenset({"body", "query", "path", "header", "cookie"})


class ValidationError(BaseAppError):
    """Raised when a request field is missing, empty or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(detail=f"{field}: {message}", status_code=HTTP_400_BAD_REQUEST)
        self.field = field


class SelfDeletionError(BaseAppError):
    """Raised when an admin tries to delete their own account."""

    def __init__(self) -> None:
        super().__init__("Cannot delete your own account", HTTP_400_BAD_REQUEST)


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    parts = [str(part) for part in loc if str(part) not in _LOCATION_ROOTS]
    return ".".join(parts) or "request"


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """
    Flatten pydantic errors into ``{field, message, type}`` entries.

    Args:
        exc: The RequestValidationError raised by FastAPI.

    Returns:
        list[dict[str, Any]]: One entry per failing field.
    """
    formatted_errors = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value"))
        # pydantic prefixes messages raised from validators
        message = message.removeprefix("Value error, ")
        formatted_errors.append(
            {
                "field": _field_name(error.get("loc", ())),
                "message": message,
                "type": error.get("type", "validation_error"),
            },
        )
    return formatted_errors


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle Pydantic validation errors as 400 envelopes naming the field.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    formatted_errors = format_validation_errors(cast(RequestValidationError, exc))
    first = formatted_errors[0] if formatted_errors else {"field": "request", "message": "Invalid"}

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=error_envelope(
            f"{first['field']}: {first['message']}",
            "ValidationError",
            errors=formatted_errors,
        ),
    )


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render framework HTTP errors (unknown routes, bad methods) as envelopes."""
    http_exc = cast(StarletteHTTPException, exc)
    logger.info(f"{http_exc.detail} for ip: {host(request)} for endpoint {request.url.path}")
    return ORJSONResponse(
        status_code=http_exc.status_code,
        content=error_envelope(str(http_exc.detail), "HTTPException"),
        headers=getattr(http_exc, "headers", None),
    )
