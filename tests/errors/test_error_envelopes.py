# tests/errors/test_error_envelopes.py
"""Tests for the uniform error envelope."""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi.exceptions import RequestValidationError

from app.configs import settings
from app.configs.settings import STORE_TIMEOUT_MESSAGE
from app.errors import (
    BaseAppError,
    DatabaseError,
    QueryTimeoutError,
    ReferenceInUseError,
    ValidationError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_envelope,
    format_validation_errors,
    validation_exception_handler,
)


@pytest.fixture
def request_mock() -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = "/api/test"
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500
        assert error.error == "BaseAppError"

    def test_str_representation(self) -> None:
        """Test string representation returns the message."""
        assert str(BaseAppError("Test error")) == "Test error"

    def test_envelope(self) -> None:
        """Test the envelope shape."""
        assert error_envelope("Nope", "SomeError", extra=1) == {
            "success": False,
            "message": "Nope",
            "error": "SomeError",
            "extra": 1,
        }


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.mark.asyncio
    async def test_client_error(self, request_mock: MagicMock) -> None:
        """Test 4xx errors render their message and log a warning."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(request_mock, BaseAppError("Test error", 400))

        assert response.status_code == 400
        assert orjson.loads(response.body) == {
            "success": False,
            "message": "Test error",
            "error": "BaseAppError",
        }
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    @pytest.mark.asyncio
    async def test_extra_attributes_travel(self, request_mock: MagicMock) -> None:
        """Test extra exception attributes are added to the envelope."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, ReferenceInUseError("author", 2))

        body = orjson.loads(response.body)
        assert body["blogsCount"] == 2
        assert body["message"] == "Cannot delete this author. 2 blogs are using it."

    @pytest.mark.asyncio
    async def test_validation_error_names_field(self, request_mock: MagicMock) -> None:
        """Test application validation errors carry the field."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, ValidationError("tags", "At least one tag is required"))

        body = orjson.loads(response.body)
        assert response.status_code == 400
        assert body["message"] == "tags: At least one tag is required"
        assert body["field"] == "tags"

    @pytest.mark.asyncio
    async def test_timeout_is_gateway_timeout(self, request_mock: MagicMock) -> None:
        """Test store timeouts answer 504 and log an error."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(request_mock, QueryTimeoutError())

        assert response.status_code == 504
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_generic_exception(self, request_mock: MagicMock) -> None:
        """Test plain exceptions fall back to 500."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, ValueError("Something went wrong"))

        assert response.status_code == 500
        assert orjson.loads(response.body)["message"] == "Internal Server Error"


class TestUnhandled:
    """Catch-all handler."""

    @pytest.mark.asyncio
    async def test_exposes_error_outside_production(self, request_mock: MagicMock) -> None:
        """Test the exception text is shown in development."""
        logger = MagicMock()
        handler = create_unhandled_exception_handler(logger)

        response = await handler(request_mock, RuntimeError("kaboom"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {
            "success": False,
            "message": "Internal Server Error",
            "error": "kaboom",
        }
        logger.exception.assert_called_once()


class TestRequestValidation:
    """Request validation formatting."""

    def test_location_prefix_is_dropped(self) -> None:
        """Test body/query prefixes are removed from field names."""
        exc = RequestValidationError(
            [
                {"loc": ("body", "title"), "msg": "Value error, Field is required", "type": "value_error"},
                {"loc": ("query", "page"), "msg": "Input should be a valid integer", "type": "int_parsing"},
            ],
        )

        errors = format_validation_errors(exc)

        assert errors == [
            {"field": "title", "message": "Field is required", "type": "value_error"},
            {"field": "page", "message": "Input should be a valid integer", "type": "int_parsing"},
        ]

    @pytest.mark.asyncio
    async def test_handler_reports_first_error(self, request_mock: MagicMock) -> None:
        """Test the message names the first failing field."""
        exc = RequestValidationError(
            [{"loc": ("body", "name"), "msg": "Value error, Name is required", "type": "value_error"}],
        )

        response = await validation_exception_handler(request_mock, exc)

        body = orjson.loads(response.body)
        assert response.status_code == 400
        assert body["message"] == "name: Name is required"
        assert body["error"] == "ValidationError"
        assert len(body["errors"]) == 1


class TestProductionMasking:
    """Server error details stay out of production responses."""

    @pytest.fixture(autouse=True)
    def production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    @pytest.mark.asyncio
    async def test_internal_error_message_is_masked(self, request_mock: MagicMock) -> None:
        """Test a 500 never echoes its detail in production."""
        logger = MagicMock()
        handler = create_exception_handler(logger)
        exc = DatabaseError("connection to db-internal.10.0.0.5 user=blog_admin failed")

        response = await handler(request_mock, exc)

        assert response.status_code == 500
        assert orjson.loads(response.body) == {
            "success": False,
            "message": "Internal Server Error",
            "error": "Internal Server Error",
        }
        assert "db-internal" in logger.error.call_args.args[0]

    @pytest.mark.asyncio
    async def test_timeout_keeps_its_advice(self, request_mock: MagicMock) -> None:
        """Test the 504 message still suggests narrowing the query."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, QueryTimeoutError())

        body = orjson.loads(response.body)
        assert response.status_code == 504
        assert body["message"] == STORE_TIMEOUT_MESSAGE
        assert body["error"] == "Internal Server Error"

    @pytest.mark.asyncio
    async def test_client_errors_are_untouched(self, request_mock: MagicMock) -> None:
        """Test 4xx messages are shown as they are."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, ReferenceInUseError("category", 1))

        assert orjson.loads(response.body)["message"] == (
            "Cannot delete this category. 1 blog is using it."
        )

    @pytest.mark.asyncio
    async def test_unhandled_error_text_is_hidden(self, request_mock: MagicMock) -> None:
        """Test the catch-all handler hides the exception text."""
        handler = create_unhandled_exception_handler(MagicMock())

        response = await handler(request_mock, RuntimeError("kaboom"))

        assert orjson.loads(response.body)["error"] == "Internal Server Error"
