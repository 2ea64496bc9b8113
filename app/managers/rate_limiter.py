"""Rate limiter configuration using slowapi."""

from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig
from app.errors.base import error_envelope
from app.monitoring import get_logger
from app.utils.helpers import host

logger = get_logger(__name__)


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Uses API key from header if available, otherwise falls back to IP address.

    Args:
        request: FastAPI request object.

    Returns:
        Unique identifier string.
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"apikey:{api_key}"

    remote_address = get_remote_address(request)
    return f"ip:{remote_address}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


def read_limit(key: str) -> str:
    """Tiered limit for read endpoints; API-key clients get more headroom."""
    return "120/minute" if key.startswith("apikey") else "60/minute"


def write_limit(key: str) -> str:
    """Tiered limit for mutating endpoints."""
    return "30/minute" if key.startswith("apikey") else "10/minute"


def auth_limit(key: str) -> str:
    """Limit for signup and login, kept low against credential stuffing."""
    return "10/minute" if key.startswith("apikey") else "5/minute"


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle rate limit exceeded exceptions.

    Args:
        request: FastAPI request object.
        exc: RateLimitExceeded exception.

    Returns:
        Error envelope with the violated limit and the retry delay.
    """
    http_exc = cast(RateLimitExceeded, exc)
    response = _rate_limit_exceeded_handler(request, http_exc)
    logger.warning(f"Rate limit exceeded for ip: {host(request)} on {request.url.path}")
    headers = {
        key: value
        for key, value in response.headers.items()
        if key.lower().startswith("x-ratelimit") or key.lower() == "retry-after"
    }
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content=error_envelope(
            "Too many requests, please try again later",
            "RateLimitExceeded",
            allowedRequests=http_exc.detail,
        ),
        headers=headers,
    )
