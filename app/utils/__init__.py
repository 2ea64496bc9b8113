"""Utility helper functions."""

from app.utils.helpers import (
    get_summary,
    host,
    parse_bool,
    split_list,
    today_str,
    utc_now,
)
from app.utils.slug import slugify

__all__ = [
    "get_summary",
    "host",
    "parse_bool",
    "slugify",
    "split_list",
    "today_str",
    "utc_now",
]
