"""Core application modules."""

from app.db.database import (
    Database,
    execute_bounded,
    get_database,
    get_session,
    is_timeout_error,
)

__all__ = [
    "Database",
    "execute_bounded",
    "get_database",
    "get_session",
    "is_timeout_error",
]
