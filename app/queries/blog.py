"""
Blog listing query builder.

Every blog read endpoint goes through one builder parameterized by a
per-endpoint ``ListingPolicy``: the policy decides the filter predicate
and the sort key, the shared code adds search and the pagination window.
The result is a ``ListingPlan`` holding both the page query and the count
query over the same filter.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import ColumnElement, Select, and_, func, literal_column, or_, select
from sqlalchemy.sql.elements import UnaryExpression

from app.models.blog import BlogDB
from app.queries.pagination import PageWindow, page_window

PUBLISHED = "published"
TEXT_SEARCH_CONFIG = "english"
# Full-text indexes drop very short tokens, so short terms use substring matching.
MIN_FULL_TEXT_LENGTH = 3
# Inlined rather than bound so the expression matches the full-text index
SPACE = literal_column("' '")

type Criteria = list[ColumnElement[bool]]


class ListingEndpoint(StrEnum):
    ALL = "all"
    PUBLISHED = "published"
    FEATURED = "featured"
    SCHEDULED = "scheduled"


@dataclass(frozen=True, slots=True)
class ListingParams:
    """Listing query values as received from the request."""

    status: str | None = None
    search: str | None = None
    page: int | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class ListingPolicy:
    """Filter and sort rules of one listing endpoint."""

    filters: Callable[[ListingParams, datetime], Criteria]
    order_by: Callable[[], tuple[UnaryExpression, ...]]


@dataclass(frozen=True, slots=True)
class ListingPlan:
    """
    Everything needed to run one listing.

    Attributes:
        endpoint: Endpoint the plan was built for.
        criteria: Predicates combined with AND.
        order_by: Sort expressions.
        window: Offset, row count and effective page.
    """

    endpoint: ListingEndpoint
    criteria: tuple[ColumnElement[bool], ...]
    order_by: tuple[UnaryExpression, ...]
    window: PageWindow
    search: str | None = field(default=None)

    def select(self) -> Select:
        """Query returning the rows of the requested page."""
        return (
            select(BlogDB)
            .where(*self.criteria)
            .order_by(*self.order_by)
            .offset(self.window.skip)
            .limit(self.window.limit)
        )

    def count(self) -> Select:
        """Query counting every row that matches the filter."""
        return select(func.count()).select_from(BlogDB).where(*self.criteria)


def visibility_clause(now: datetime) -> ColumnElement[bool]:
    """
    Published posts whose publish date has passed.

    Rows without a publish date predate scheduling and count as visible.
    """
    return and_(
        # pyrefly: ignore [bad-argument-type]
        BlogDB.status == PUBLISHED,
        # pyrefly: ignore [missing-attribute]
        or_(BlogDB.publish_date.is_(None), BlogDB.publish_date <= now),
    )


def scheduled_clause(now: datetime) -> ColumnElement[bool]:
    """Published posts that become visible in the future."""
    # pyrefly: ignore [bad-argument-type]
    return and_(BlogDB.status == PUBLISHED, BlogDB.publish_date > now)


def search_document() -> ColumnElement:
    """Text the full-text index covers; must match the migration's index expression."""
    return func.to_tsvector(
        literal_column(f"'{TEXT_SEARCH_CONFIG}'"),
        # pyrefly: ignore [unsupported-operation]
        BlogDB.title + SPACE + BlogDB.content + SPACE + BlogDB.excerpt,
    )


def search_clause(term: str, *, full_text: bool = True) -> ColumnElement[bool]:
    """
    Predicate for a free-text search.

    Args:
        term: Trimmed, non-empty search text.
        full_text: Whether the dialect supports PostgreSQL full-text search.

    Returns:
        ColumnElement[bool]: Full-text match for longer terms, otherwise a
            case-insensitive substring match on title or content.
    """
    if full_text and len(term) >= MIN_FULL_TEXT_LENGTH:
        query = func.plainto_tsquery(literal_column(f"'{TEXT_SEARCH_CONFIG}'"), term)
        return search_document().op("@@")(query)
    return or_(
        # pyrefly: ignore [missing-attribute]
        BlogDB.title.icontains(term, autoescape=True),
        # pyrefly: ignore [missing-attribute]
        BlogDB.content.icontains(term, autoescape=True),
    )


def normalize_search(search: str | None) -> str | None:
    if search is None:
        return None
    term = search.strip()
    return term or None


def _all_filters(params: ListingParams, now: datetime) -> Criteria:
    if params.status:
        # pyrefly: ignore [bad-argument-type]
        return [BlogDB.status == params.status]
    return []


def _published_filters(params: ListingParams, now: datetime) -> Criteria:
    return [visibility_clause(now)]


def _featured_filters(params: ListingParams, now: datetime) -> Criteria:
    status = params.status or PUBLISHED
    # pyrefly: ignore [bad-argument-type]
    criteria: Criteria = [BlogDB.is_featured.is_(True), BlogDB.status == status]
    if status == PUBLISHED:
        criteria.append(visibility_clause(now))
    return criteria


def _scheduled_filters(params: ListingParams, now: datetime) -> Criteria:
    return [scheduled_clause(now)]


def _newest_first() -> tuple[UnaryExpression, ...]:
    # pyrefly: ignore [missing-attribute]
    return (BlogDB.created_at.desc(),)


def _latest_published_first() -> tuple[UnaryExpression, ...]:
    # pyrefly: ignore [missing-attribute]
    return (BlogDB.publish_date.desc().nulls_last(),)


def _earliest_due_first() -> tuple[UnaryExpression, ...]:
    # pyrefly: ignore [missing-attribute]
    return (BlogDB.publish_date.asc(),)


LISTING_POLICIES: dict[ListingEndpoint, ListingPolicy] = {
    ListingEndpoint.ALL: ListingPolicy(_all_filters, _newest_first),
    ListingEndpoint.PUBLISHED: ListingPolicy(_published_filters, _latest_published_first),
    ListingEndpoint.FEATURED: ListingPolicy(_featured_filters, _latest_published_first),
    ListingEndpoint.SCHEDULED: ListingPolicy(_scheduled_filters, _earliest_due_first),
}


def build_listing_plan(
    endpoint: ListingEndpoint,
    params: ListingParams,
    *,
    now: datetime | None = None,
    full_text: bool = True,
    safety_cap: int | None = None,
    max_limit: int | None = None,
) -> ListingPlan:
    """
    Build the filter, sort and pagination window for one listing request.

    Args:
        endpoint: Listing endpoint being served.
        params: Request query values.
        now: Reference time for publish-date rules; defaults to the current UTC time.
        full_text: Use the full-text predicate for long search terms.
        safety_cap: Row cap when no ``limit`` is given.
        max_limit: Upper bound for ``limit``.

    Returns:
        ListingPlan: Page and count queries sharing one filter.
    """
    reference = now or datetime.now(tz=UTC)
    policy = LISTING_POLICIES[endpoint]

    criteria = policy.filters(params, reference)
    term = normalize_search(params.search)
    if term is not None:
        criteria.append(search_clause(term, full_text=full_text))

    return ListingPlan(
        endpoint=endpoint,
        criteria=tuple(criteria),
        order_by=policy.order_by(),
        window=page_window(
            params.page,
            params.limit,
            safety_cap=safety_cap,
            max_limit=max_limit,
        ),
        search=term,
    )


def is_publicly_visible(blog: BlogDB, now: datetime | None = None) -> bool:
    """
    Whether a blog fetched by slug may be shown.

    A published post with a future publish date stays hidden so slugs
    cannot reveal scheduled content early.
    """
    if blog.status != PUBLISHED or blog.publish_date is None:
        return True
    reference = now or datetime.now(tz=UTC)
    publish_date = blog.publish_date
    if publish_date.tzinfo is None:
        publish_date = publish_date.replace(tzinfo=UTC)
    return publish_date <= reference
