# tests/decorators/test_with_retry.py
"""Tests for app/decorators/with_retry.py module."""

import pytest

from app.decorators import with_retry
from app.errors import PasswordHashingError


class Flaky:
    """Awaitable call that fails a set number of times before succeeding."""

    def __init__(self, failures: int, error: Exception) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "done"


class TestWithRetry:
    """Exponential backoff policy."""

    @pytest.mark.asyncio
    async def test_recovers_from_transient_error(self) -> None:
        """Test a transient failure is retried until the call succeeds."""
        flaky = Flaky(2, ConnectionError("reset"))
        wrapped = with_retry(max_retries=3, base_delay=0.01, max_delay=0.02)(flaky)

        assert await wrapped() == "done"
        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self) -> None:
        """Test the original error surfaces once attempts are spent."""
        flaky = Flaky(5, TimeoutError("slow"))
        wrapped = with_retry(max_retries=2, base_delay=0.01, max_delay=0.02)(flaky)

        with pytest.raises(TimeoutError, match="slow"):
            await wrapped()
        assert flaky.calls == 2

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self) -> None:
        """Test errors outside the retry set fail on the first attempt."""
        flaky = Flaky(1, ValueError("bad input"))
        wrapped = with_retry(base_delay=0.01)(flaky)

        with pytest.raises(ValueError, match="bad input"):
            await wrapped()
        assert flaky.calls == 1

    @pytest.mark.asyncio
    async def test_custom_exception_type(self) -> None:
        """Test a single custom exception type can be retried."""
        flaky = Flaky(1, PasswordHashingError("busy"))
        wrapped = with_retry(base_delay=0.01, exec_retry=PasswordHashingError)(flaky)

        assert await wrapped() == "done"
        assert flaky.calls == 2
