"""URL slug generation."""

from re import compile as re_compile

_WHITESPACE = re_compile(r"\s+")
_NON_WORD = re_compile(r"[^a-z0-9_-]")
_HYPHEN_RUNS = re_compile(r"-{2,}")


def slugify(text: str) -> str:
    """
    Convert display text into a URL-safe identifier.

    The transform lowercases, turns whitespace runs into single hyphens,
    expands ``&`` to ``-and-``, strips anything outside ``[a-z0-9_-]``,
    collapses hyphen runs and trims hyphens from both ends.

    Args:
        text: Arbitrary display text such as a title or a name.

    Returns:
        str: The slug. Empty when the input holds no usable characters;
        callers must reject that instead of persisting it.

    Example:
        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("Tips & Tricks")
        'tips-and-tricks'
    """
    slug = _WHITESPACE.sub("-", text.lower().strip())
    slug = slug.replace("&", "-and-")
    slug = _NON_WORD.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")
