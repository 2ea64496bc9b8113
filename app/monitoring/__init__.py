"""
Monitoring and observability module.

This module provides:
- Structured logging with PII sanitization
- Prometheus metrics collection

Usage
-----
>>> from app.monitoring import get_logger
>>> logger = get_logger(__name__)
"""

from app.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    sanitize_headers,
    sanitize_log_message,
)
from app.monitoring.prometheus import MetricsCollector, metrics, setup_prometheus

__all__ = [
    "MetricsCollector",
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "metrics",
    "sanitize_headers",
    "sanitize_log_message",
    "setup_prometheus",
]
