"""Tests for constants module."""
from license_bundler.constants import (
    EXIT_ERROR,
    EXIT_ISSUES,
    EXIT_SUCCESS,
    LICENSE_NOT_FOUND_TEXT,
    SITE_PACKAGES_PLACEHOLDER,
)


class TestExitCodes:
    """Tests for process exit codes."""

    def test_exit_codes_are_distinct(self) -> None:
        """Test that every outcome has its own exit code."""
        assert len({EXIT_SUCCESS, EXIT_ISSUES, EXIT_ERROR}) == 3

    def test_success_is_zero(self) -> None:
        """Test that success exits with 0."""
        assert EXIT_SUCCESS == 0

    def test_issues_and_error_values(self) -> None:
        """Test that issues exit with 1 and errors with 2."""
        assert EXIT_ISSUES == 1
        assert EXIT_ERROR == 2


class TestPlaceholders:
    """Tests for placeholder strings."""

    def test_not_found_text(self) -> None:
        """Test the NOT FOUND placeholder value."""
        assert LICENSE_NOT_FOUND_TEXT == "NOT FOUND"

    def test_site_packages_placeholder(self) -> None:
        """Test the site-packages placeholder looks like a variable."""
        assert SITE_PACKAGES_PLACEHOLDER.startswith("$")
