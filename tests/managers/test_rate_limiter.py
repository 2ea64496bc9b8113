# tests/managers/test_rate_limiter.py
"""Tests for app/managers/rate_limiter.py module."""

from unittest.mock import MagicMock, patch

import orjson
import pytest

from app.managers.rate_limiter import (
    auth_limit,
    get_identifier,
    limiter,
    rate_limit_exceeded_handler,
    read_limit,
    write_limit,
)


class TestGetIdentifier:
    """Tests for get_identifier function."""

    def test_returns_api_key_when_present(self) -> None:
        """Test that API key is used when present in headers."""
        request = MagicMock()
        request.headers.get.return_value = "test-api-key-123"

        assert get_identifier(request) == "apikey:test-api-key-123"

    def test_returns_ip_when_no_api_key(self) -> None:
        """Test that IP address is used when no API key is present."""
        request = MagicMock()
        request.headers.get.return_value = None

        with patch(
            "app.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"


class TestTieredLimits:
    """Per-tier limit strings."""

    @pytest.mark.parametrize(
        ("limit", "anonymous", "keyed"),
        [
            (read_limit, "60/minute", "120/minute"),
            (write_limit, "10/minute", "30/minute"),
            (auth_limit, "5/minute", "10/minute"),
        ],
    )
    def test_limits(self, limit: object, anonymous: str, keyed: str) -> None:
        """Test API-key clients get more headroom than anonymous ones."""
        assert limit("ip:1.2.3.4") == anonymous  # type: ignore[operator]
        assert limit("apikey:abc") == keyed  # type: ignore[operator]


class TestLimiterInstance:
    """Tests for limiter instance."""

    def test_limiter_is_configured(self) -> None:
        """Test that limiter is properly configured."""
        assert limiter is not None


class TestRateLimitExceededHandler:
    """Tests for rate_limit_exceeded_handler."""

    @pytest.mark.asyncio
    async def test_envelope(self) -> None:
        """Test 429 responses use the error envelope."""
        request = MagicMock()
        request.client.host = "10.0.0.1"
        request.url.path = "/api/auth/login"
        exc = MagicMock()
        exc.detail = "5 per 1 minute"

        with patch(
            "app.managers.rate_limiter._rate_limit_exceeded_handler",
            return_value=MagicMock(headers={"Retry-After": "60", "X-RateLimit-Limit": "5"}),
        ):
            response = await rate_limit_exceeded_handler(request, exc)

        assert response.status_code == 429
        assert orjson.loads(response.body) == {
            "success": False,
            "message": "Too many requests, please try again later",
            "error": "RateLimitExceeded",
            "allowedRequests": "5 per 1 minute",
        }
        assert response.headers["retry-after"] == "60"
