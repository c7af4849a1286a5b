"""Unit tests for input normalisation."""

import pytest

from core.exceptions import ValidationFailedError
from domain.validation import (
    check_password,
    clean_display_name,
    clean_email,
    clean_optional_email,
    clean_slug,
    clean_username,
)


class TestDisplayName:
    def test_collapses_whitespace(self):
        assert clean_display_name("  Alex   Smith ") == "Alex Smith"

    @pytest.mark.parametrize("value", ["", " ", "A"])
    def test_rejects_too_short(self, value: str):
        with pytest.raises(ValidationFailedError) as exc_info:
            clean_display_name(value)

        assert exc_info.value.message == "Please enter a name"
        assert exc_info.value.details == {"field": "display_name"}

    def test_rejects_too_long(self):
        with pytest.raises(ValidationFailedError):
            clean_display_name("x" * 51)


class TestEmail:
    def test_lowercases(self):
        assert clean_email(" Alex@Example.COM ") == "alex@example.com"

    def test_rejects_malformed(self):
        with pytest.raises(ValidationFailedError):
            clean_email("not-an-email")

    def test_blank_optional_email_is_none(self):
        assert clean_optional_email("   ") is None
        assert clean_optional_email(None) is None


class TestOtherFields:
    def test_password_minimum_length(self):
        with pytest.raises(ValidationFailedError):
            check_password("short")
        assert check_password("long enough") == "long enough"

    @pytest.mark.parametrize("value", ["ab", "has space", "x" * 33, "émile"])
    def test_rejects_bad_usernames(self, value: str):
        with pytest.raises(ValidationFailedError):
            clean_username(value)

    def test_slug_is_lowercased(self):
        assert clean_slug("Iceland-2025") == "iceland-2025"

    @pytest.mark.parametrize("value", ["", "two--dashes", "-leading", "under_score", "a b"])
    def test_rejects_bad_slugs(self, value: str):
        with pytest.raises(ValidationFailedError):
            clean_slug(value)
