"""
Prometheus metrics collection with cardinality protection.

HTTP request metrics come from prometheus-fastapi-instrumentator; this
module adds the blog-specific series:
- store statement timeouts per operation
- asset uploads and deletions per provider and outcome
- route latency recorded by the ``timed`` decorator

Security
--------
User IDs, slugs, search terms and emails are NEVER used as labels.

Examples
--------
>>> from app.monitoring import metrics
>>> metrics.record_store_timeout("blogs.list")
"""

from re import IGNORECASE, sub

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from app.configs import settings

MAX_LABEL_VALUE_LENGTH: int = 128

# Latency buckets based on expected latency profile
LATENCY_BUCKETS: tuple[float, ...] = (
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)


class MetricsCollector:
    """
    Metrics collector with cardinality protection.

    Attributes
    ----------
    endpoint_duration_seconds : Histogram
        Handler latency per endpoint pattern
    store_timeouts_total : Counter
        Statements aborted by the store time bound
    asset_operations_total : Counter
        Asset uploads and deletions by provider and outcome
    """

    def __init__(self) -> None:
        self.endpoint_duration_seconds = Histogram(
            "blog_endpoint_duration_seconds",
            "Route handler duration in seconds",
            ["endpoint"],
            buckets=LATENCY_BUCKETS,
        )
        self.store_timeouts_total = Counter(
            "blog_store_timeouts_total",
            "Total number of store statements aborted by the time bound",
            ["operation"],
        )
        self.asset_operations_total = Counter(
            "blog_asset_operations_total",
            "Total number of asset service operations",
            ["provider", "operation", "outcome"],
        )

    @staticmethod
    def _validate_label_value(value: str) -> str:
        """Truncate label values that would bloat the series index."""
        return value[:MAX_LABEL_VALUE_LENGTH]

    @staticmethod
    def _sanitize_endpoint(endpoint: str) -> str:
        """
        Sanitize endpoint path by replacing IDs with placeholders.

        Examples
        --------
        >>> MetricsCollector._sanitize_endpoint("/api/blogs/550e8400-e29b-41d4-a716-446655440000")
        '/api/blogs/{uuid}'
        """
        return sub(
            r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
            "{uuid}",
            endpoint,
            flags=IGNORECASE,
        )

    def observe_endpoint(self, endpoint: str, duration: float) -> None:
        endpoint = self._validate_label_value(self._sanitize_endpoint(endpoint))
        self.endpoint_duration_seconds.labels(endpoint=endpoint).observe(duration)

    def record_store_timeout(self, operation: str) -> None:
        """
        Record a statement aborted by the store time bound.

        Examples
        --------
        >>> metrics.record_store_timeout("blogs.list")
        """
        self.store_timeouts_total.labels(operation=self._validate_label_value(operation)).inc()

    def record_asset_operation(self, provider: str, operation: str, *, success: bool) -> None:
        self.asset_operations_total.labels(
            provider=provider,
            operation=operation,
            outcome="success" if success else "failure",
        ).inc()


# Global metrics collector instance
metrics = MetricsCollector()


def setup_prometheus(app: FastAPI) -> Instrumentator:
    """
    Set up Prometheus instrumentation for the FastAPI app.

    Args:
        app: The FastAPI application instance.

    Returns:
        Configured Instrumentator instance.
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health"],
        inprogress_name="blog_http_requests_inprogress",
        inprogress_labels=True,
    )

    if settings.ENABLE_METRICS:
        instrumentator.instrument(app)
        instrumentator.expose(
            app,
            endpoint="/metrics",
            include_in_schema=False,
            tags=["Monitoring"],
        )

    return instrumentator
