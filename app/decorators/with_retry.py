from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.monitoring import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

# Network blips from the store drivers and the media SDK
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (ConnectionError, TimeoutError)


def _warn_before_sleep(attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.warning(
            "Retrying after transient failure",
            operation=state.fn.__qualname__ if state.fn else "unknown",
            attempt=state.attempt_number,
            max_attempts=attempts,
            delay=round(state.next_action.sleep, 2) if state.next_action else 0.0,
            error=repr(error),
        )

    return before_sleep


def with_retry(
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: type[Exception] | tuple[type[Exception], ...] = TRANSIENT_ERRORS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async call with exponential backoff.

    Only idempotent operations should be wrapped: an image delete or a
    password hash may run twice, an upload may not. The last error is
    re-raised once ``max_retries`` attempts are spent.

    Args:
        max_retries: Total attempts, the first call included.
        base_delay: First backoff in seconds; later ones double.
        max_delay: Upper bound for a single backoff in seconds.
        exec_retry: Exception type or types worth another attempt.

    Returns:
        Decorator applying the retry policy.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_warn_before_sleep(max_retries),
        reraise=True,
    )
