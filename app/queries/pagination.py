"""Pagination window and envelope metadata for listing endpoints."""

from dataclasses import dataclass
from math import ceil

from app.configs import settings

# Keeps OFFSET inside a signed 64-bit integer for any page size
MAX_PAGE = 2**31 - 1


@dataclass(frozen=True, slots=True)
class PageWindow:
    """
    Rows to fetch for one listing request.

    ``page`` is None when the caller did not ask for pagination; the window
    is then the safety cap starting at the first row.
    """

    skip: int
    limit: int
    page: int | None = None

    @property
    def paginated(self) -> bool:
        return self.page is not None


def page_window(
    page: int | None,
    limit: int | None,
    *,
    safety_cap: int | None = None,
    max_limit: int | None = None,
) -> PageWindow:
    """
    Resolve ``page`` and ``limit`` query values into a fetch window.

    Args:
        page: Requested page; absent or non-positive means the first page,
            anything past ``MAX_PAGE`` means ``MAX_PAGE``.
        limit: Requested page size; absent means an unpaginated listing.
        safety_cap: Row cap for unpaginated listings.
        max_limit: Upper bound for ``limit``.

    Returns:
        PageWindow: Offset, row count and the effective page.
    """
    cap = safety_cap if safety_cap is not None else settings.LISTING_SAFETY_CAP
    ceiling = max_limit if max_limit is not None else settings.LISTING_MAX_LIMIT

    if limit is None:
        return PageWindow(skip=0, limit=cap)

    size = min(max(limit, 1), ceiling)
    current = min(page, MAX_PAGE) if page is not None and page > 0 else 1
    return PageWindow(skip=(current - 1) * size, limit=size, page=current)


def total_pages(total_count: int, limit: int) -> int:
    """Number of pages needed to show ``total_count`` rows, ``limit`` per page."""
    if limit <= 0:
        return 0
    return ceil(total_count / limit)


def pagination_fields(window: PageWindow, total_count: int) -> dict[str, int]:
    """
    Envelope keys describing the page.

    Empty for unpaginated listings so the keys are omitted rather than
    zero-filled.
    """
    if window.page is None:
        return {}
    return {
        "current_page": window.page,
        "total_pages": total_pages(total_count, window.limit),
    }
