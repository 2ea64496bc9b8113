from collections.abc import Awaitable, Callable
from functools import wraps
from time import perf_counter
from typing import ParamSpec, TypeVar

from app.monitoring.prometheus import MetricsCollector
from app.monitoring.prometheus import metrics as default_metrics

# Type variables for generic decorator
P = ParamSpec("P")
R = TypeVar("R")


def timed(
    endpoint: str | None = None,
    metrics: MetricsCollector | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Time async functions with automatic metrics recording.

    Args:
        endpoint: API endpoint path (defaults to function name).
        metrics: Optional metrics collector (defaults to global instance).

    Returns:
        Decorated function with timing instrumentation.

    Example:
        @timed("/api/blogs")
        async def list_blogs() -> BlogListEnvelope:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        ep = endpoint or func.__name__
        collector = metrics or default_metrics

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                collector.observe_endpoint(ep, perf_counter() - start)

        return wrapper

    return decorator
