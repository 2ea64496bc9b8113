from app.queries.blog import (
    LISTING_POLICIES,
    ListingEndpoint,
    ListingParams,
    ListingPlan,
    ListingPolicy,
    build_listing_plan,
    is_publicly_visible,
    scheduled_clause,
    search_clause,
    visibility_clause,
)
from app.queries.pagination import PageWindow, page_window, pagination_fields, total_pages

__all__ = [
    "LISTING_POLICIES",
    "ListingEndpoint",
    "ListingParams",
    "ListingPlan",
    "ListingPolicy",
    "PageWindow",
    "build_listing_plan",
    "is_publicly_visible",
    "page_window",
    "pagination_fields",
    "scheduled_clause",
    "search_clause",
    "total_pages",
    "visibility_clause",
]
