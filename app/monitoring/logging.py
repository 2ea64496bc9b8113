"""
Structured logging for the blog API.

Console output is rendered for humans in development and as JSON lines
everywhere else. Every event passes through a redaction step before it is
rendered, so credentials that show up in log calls never reach a sink:

- values logged under credential keys (``password``, ``token``, ...)
- bearer tokens and JWTs embedded in free text
- email addresses
- Cloudinary URLs carrying an API key and secret

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Blog created", blog_id="123", slug="hello-world")
"""

from collections.abc import Mapping
from logging import INFO, Handler, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path as SyncPath
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.processors import json as struct_json
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from app.configs.settings import settings
from app.utils.helpers import today_str

REDACTED = "[REDACTED]"

# Event keys whose values are always secrets, compared lower-cased
CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "passwordhash",
        "token",
        "access_token",
        "authorization",
        "cookie",
        "api_secret",
    },
)

SECRET_PATTERNS: tuple[tuple[Pattern[str], str], ...] = (
    (re_compile(r"cloudinary://[^:\s]+:[^@\s]+@"), "cloudinary://[REDACTED]@"),
    (re_compile(r"(?i)bearer\s+[a-z0-9._~+/-]+=*"), "Bearer [REDACTED]"),
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
)

# Escaped so a crafted title or slug cannot forge extra log lines
CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})

ROTATE_BYTES = 5 * 1024 * 1024
ROTATE_BACKUPS = 5


def sanitize_log_message(message: str) -> str:
    r"""
    Escape control characters and redact secrets in free text.

    Examples
    --------
    >>> sanitize_log_message("login by a@b.io\nforged")
    'login by [REDACTED_EMAIL]\\nforged'
    """
    message = message.translate(CONTROL_CHARS)
    for pattern, replacement in SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def sanitize_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``headers`` with credential headers redacted."""
    return {k: REDACTED if k.lower() in CREDENTIAL_KEYS else v for k, v in headers.items()}


def _scrub(key: str, value: Any) -> Any:
    if key.lower() in CREDENTIAL_KEYS:
        return REDACTED
    if isinstance(value, str):
        return sanitize_log_message(value)
    if isinstance(value, Mapping):
        return {k: _scrub(str(k), v) for k, v in value.items()}
    return value


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def redact_event(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """
    Structlog processor that redacts secrets from every event field.

    Nested mappings such as logged headers are walked one level at a time,
    credential keys are replaced outright and string values are scanned for
    embedded secrets.
    """
    return {key: _scrub(key, value) for key, value in event_dict.items()}


def _renderer(*, colors: bool) -> Processor:
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer(serializer=struct_json.dumps)


def _attach(handler: Handler, *, colors: bool) -> None:
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                ExtraAdder(),
                redact_event,
                _renderer(colors=colors),
            ],
            foreign_pre_chain=[merge_contextvars, add_log_level, add_timestamp],
        ),
    )
    root.addHandler(handler)


def configure_logging() -> None:
    """
    Route structlog and stdlib logging through one redacting pipeline.

    Uvicorn, SQLAlchemy and slowapi log through the standard library; their
    records are picked up by the same handlers as the application's own
    structlog events.
    """
    # Reloads would otherwise stack duplicate handlers
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            add_timestamp,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    _attach(StreamHandler(), colors=True)

    if settings.LOG_TO_FILE:
        log_file = SyncPath(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=ROTATE_BYTES,
            backupCount=ROTATE_BACKUPS,
        )
        file_handler.setLevel(INFO)
        _attach(file_handler, colors=False)


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
