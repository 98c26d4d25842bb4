"""Tests for the diagnostics collector."""

from license_bundler.models.diagnostics import (
    DiagnosticCode,
    DiagnosticLevel,
    Diagnostics,
)


class TestDiagnostics:
    """Tests for Diagnostics."""

    def test_starts_empty(self) -> None:
        """Test that a new collector is empty."""
        diagnostics = Diagnostics()
        assert len(diagnostics) == 0
        assert diagnostics.items == []

    def test_records_in_order(self) -> None:
        """Test that diagnostics keep recording order and level."""
        diagnostics = Diagnostics()
        diagnostics.info(DiagnosticCode.PREVIOUS_TEXT_USED, "first")
        diagnostics.warning(DiagnosticCode.UNSURE, "second", package_name="demo")
        diagnostics.error(DiagnosticCode.PACKAGE_MISSING, "third")

        assert [d.message for d in diagnostics] == ["first", "second", "third"]
        assert [d.level for d in diagnostics] == [
            DiagnosticLevel.INFO,
            DiagnosticLevel.WARNING,
            DiagnosticLevel.ERROR,
        ]
        assert diagnostics.items[1].package_name == "demo"

    def test_filters(self) -> None:
        """Test warnings, errors and by_code filters."""
        diagnostics = Diagnostics()
        diagnostics.warning(DiagnosticCode.UNSURE, "a")
        diagnostics.warning(DiagnosticCode.NO_TEMPLATE, "b")
        diagnostics.error(DiagnosticCode.ROOT_MISMATCH, "c")

        assert len(diagnostics.warnings) == 2
        assert len(diagnostics.errors) == 1
        assert [d.message for d in diagnostics.by_code(DiagnosticCode.NO_TEMPLATE)] == [
            "b"
        ]

    def test_extend(self) -> None:
        """Test that one collector can absorb another."""
        first = Diagnostics()
        second = Diagnostics()
        second.info(DiagnosticCode.UNREADABLE_FILE, "skipped")
        first.extend(second)
        assert len(first) == 1

    def test_str(self) -> None:
        """Test the display form of a diagnostic."""
        diagnostics = Diagnostics()
        diagnostics.warning(DiagnosticCode.UNSURE, "Confidence level UNSURE")
        assert str(diagnostics.items[0]) == "[warning] Confidence level UNSURE"
