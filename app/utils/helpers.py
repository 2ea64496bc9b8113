from collections.abc import Iterable, MutableMapping
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def split_list(value: str | Iterable[str] | None) -> list[str]:
    """
    Normalize a list-or-comma-joined-string input.

    Strings are split on commas; every element is trimmed and empty
    elements are dropped. Order is preserved.

    Args:
        value: A comma-joined string, an iterable of strings, or None.

    Returns:
        list[str]: The cleaned elements.

    Example:
        >>> split_list("a, b ,, c")
        ['a', 'b', 'c']
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item is not None and item.strip()]


def parse_bool(value: bool | str | None) -> bool | None:
    """Interpret form booleans sent as `"true"` / `"false"` strings."""
    if value is None or isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in {"true", "1", "on", "yes"}:
        return True
    if lowered in {"false", "0", "off", "no"}:
        return False
    mssg = f"Invalid boolean value: {value!r}"
    raise ValueError(mssg)
