"""Terminal output formatters using Rich."""
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from license_bundler.models.bundle import Bundle, SubsetCheckResult
from license_bundler.models.diagnostics import (
    Diagnostic,
    DiagnosticLevel,
    Diagnostics,
)

_LEVEL_STYLES = {
    DiagnosticLevel.INFO: "blue",
    DiagnosticLevel.WARNING: "yellow",
    DiagnosticLevel.ERROR: "red",
}


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class DiagnosticsFormatter:
    """Print collected diagnostics, colored by level.

    Info diagnostics are only shown in verbose mode.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._verbosity = verbosity

    def visible(self, diagnostics: Diagnostics) -> list[Diagnostic]:
        """Get the diagnostics shown at the current verbosity."""
        if self._verbosity == Verbosity.VERBOSE:
            return diagnostics.items
        return [d for d in diagnostics if d.level != DiagnosticLevel.INFO]

    def format_diagnostics(self, diagnostics: Diagnostics) -> None:
        """Print each visible diagnostic on its own line.

        Args:
            diagnostics: The collected diagnostics.
        """
        for diagnostic in self.visible(diagnostics):
            style = _LEVEL_STYLES[diagnostic.level]
            self._console.print(
                f"[{style}]{diagnostic.level.value.upper()}[/{style}] "
                f"{escape(diagnostic.message)}"
            )


class BundleSummaryFormatter:
    """Print a summary table of a bundle and the status line.

    This formatter lists every bundled package with its license and whether
    each license text was found.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._verbosity = verbosity

    def format_bundle(self, bundle: Bundle) -> None:
        """Print the summary of a bundle.

        Args:
            bundle: The bundle to summarize.
        """
        libraries = bundle.third_party_libraries
        missing = [lib for lib in libraries if lib.has_missing_text]

        if self._verbosity != Verbosity.QUIET and libraries:
            table = Table(title=f"Third-party licenses of {escape(bundle.root_name)}")
            table.add_column("Package", style="cyan", no_wrap=True)
            table.add_column("Version", style="magenta")
            table.add_column("License", style="green")
            table.add_column("Text")

            for lib in libraries:
                status = (
                    "[yellow]NOT FOUND[/yellow]"
                    if lib.has_missing_text
                    else "[green]found[/green]"
                )
                table.add_row(
                    escape(lib.package_name),
                    escape(lib.package_version),
                    escape(lib.license),
                    status,
                )
            self._console.print(table)

        if not libraries:
            self._console.print("[yellow]No third-party packages found[/yellow]")
            return

        if missing:
            self._console.print(
                f"[yellow]INCOMPLETE[/yellow] - {len(missing)} of {len(libraries)} "
                "package(s) have license text NOT FOUND"
            )
            if self._verbosity == Verbosity.QUIET:
                for lib in missing:
                    name = escape(f"{lib.package_name}@{lib.package_version}")
                    self._console.print(
                        f"  - {name}: [yellow]{escape(lib.license)}[/yellow]"
                    )
        else:
            self._console.print(
                f"[green]PASS[/green] - All {len(libraries)} license texts found"
            )

    def format_subset_result(self, result: SubsetCheckResult) -> None:
        """Print the outcome of a subset check against a previous bundle.

        Args:
            result: The subset check result.
        """
        if result.ok:
            self._console.print(
                "[green]PASS[/green] - Previous bundle is a subset of the new bundle"
            )
            return

        lines = [f"[red]![/red] {escape(m.message)}" for m in result.mismatches]
        self._console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold red]Previous bundle mismatch ({len(lines)})[/bold red]",
                border_style="red",
            )
        )
