# tests/utils/test_slugify.py
"""Tests for app/utils/slug.py module."""

import pytest

from app.utils.slug import slugify


SLUG_CASES = [
    ("Hello, World!", "hello-world"),
    ("Tips & Tricks", "tips-and-tricks"),
    ("  Leading and trailing  ", "leading-and-trailing"),
    ("multiple   spaces\tand\ttabs", "multiple-spaces-and-tabs"),
    ("--Already--hyphenated--", "already-hyphenated"),
    ("snake_case_stays", "snake_case_stays"),
    ("Café au lait", "caf-au-lait"),
    ("2024 Year in Review", "2024-year-in-review"),
]


class TestSlugify:
    """Tests for slugify function."""

    @pytest.mark.parametrize(("text", "expected"), SLUG_CASES)
    def test_slugify(self, text: str, expected: str) -> None:
        """Test display text is turned into the expected slug."""
        assert slugify(text) == expected

    @pytest.mark.parametrize(("text", "expected"), SLUG_CASES)
    def test_slugify_is_idempotent(self, text: str, expected: str) -> None:
        """Test slugifying a slug returns it unchanged."""
        assert slugify(expected) == expected
        assert slugify(slugify(text)) == slugify(text)

    @pytest.mark.parametrize("text", ["", "   ", "!!!", "-- --"])
    def test_slugify_without_usable_characters(self, text: str) -> None:
        """Test text without letters or digits yields an empty slug."""
        assert slugify(text) == ""

    def test_ampersand_alone_becomes_and(self) -> None:
        """Test a lone ampersand expands to the word and."""
        assert slugify("&") == "and"
