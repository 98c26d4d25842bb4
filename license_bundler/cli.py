"""CLI entry point for license-bundler."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from license_bundler import __version__
from license_bundler.bundler import BundleBuilder
from license_bundler.config import DEFAULT_FORMAT, BundlerConfig, load_config
from license_bundler.constants import EXIT_ERROR, EXIT_ISSUES, EXIT_SUCCESS
from license_bundler.exceptions import ConfigurationError, LicenseBundlerError
from license_bundler.models.bundle import Bundle
from license_bundler.models.diagnostics import Diagnostics
from license_bundler.output.formats import Format, load_bundle
from license_bundler.output.terminal import (
    BundleSummaryFormatter,
    DiagnosticsFormatter,
    Verbosity,
)
from license_bundler.resolvers.installed import InstalledMetadataProvider

# Status output goes to stderr so the bundle can be piped from stdout
_console = Console(stderr=True)
_error_console = Console(stderr=True)

_FORMAT_NAMES = ["json", "toml", "tml", "yaml", "yml"]


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Python License Bundler - Bundle the license texts of your dependencies.

    Finds the license text shipped by every runtime dependency of a
    project and writes them to a single JSON, TOML or YAML file.

    \b
    Examples:
        license-bundler bundle
        license-bundler bundle --format yaml -o THIRDPARTY.yml
        license-bundler bundle -o THIRDPARTY.json -p THIRDPARTY.json --check-previous
        license-bundler check old.json new.json
    """
    pass


@main.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(_FORMAT_NAMES, case_sensitive=False),
    default=None,
    help="Bundle format (default: from the output file extension, else json).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the bundle to file instead of stdout.",
)
@click.option(
    "--previous",
    "-p",
    "previous_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Previous bundle used to fill in license texts that are not found.",
)
@click.option(
    "--check-previous",
    "check_previous",
    is_flag=True,
    default=False,
    help="Fail if the previous bundle is not a subset of the new bundle.",
)
@click.option(
    "--features",
    "-F",
    "features",
    multiple=True,
    help="Optional dependency group (extra) to include. Repeatable, or "
    "comma separated.",
)
@click.option(
    "--prefer",
    "prefer",
    multiple=True,
    help="Preferred license when a package offers a choice. Repeatable, "
    "most preferred first.",
)
@click.option(
    "--ignore",
    "ignored",
    multiple=True,
    help="Package to leave out of the bundle. Repeatable.",
)
@click.option(
    "--project-dir",
    "project_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False),
    help="Directory holding a root pyproject.toml (default: current directory). "
    "Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Show informational diagnostics.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Suppress non-essential output.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
def bundle(
    output_format: str | None,
    output_path: str | None,
    previous_path: str | None,
    check_previous: bool,
    features: tuple[str, ...],
    prefer: tuple[str, ...],
    ignored: tuple[str, ...],
    project_dirs: tuple[str, ...],
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
) -> None:
    """Bundle the licenses of the project's runtime dependencies.

    \b
    Examples:
        license-bundler bundle
        license-bundler bundle --format toml > THIRDPARTY.toml
        license-bundler bundle -o THIRDPARTY.yml --prefer MIT --prefer Apache-2.0
        license-bundler bundle -F cli,server -o THIRDPARTY.json
        license-bundler bundle -o THIRDPARTY.json -p THIRDPARTY.json --check-previous
    """
    verbosity = _get_verbosity(verbose_flag, quiet_flag)
    dirs = [Path(d) for d in project_dirs] or [Path.cwd()]

    try:
        config = load_config(config_path, start_dir=dirs[0])

        output = output_path or config.output
        previous_file = previous_path or config.previous
        check = check_previous or bool(config.check_previous)
        fmt = _resolve_format(output_format, config, output, previous_file)

        if check and previous_file is None:
            raise ConfigurationError("--check-previous requires a previous bundle")

        previous = _load_previous(previous_file, fmt, verbosity)

        diagnostics = Diagnostics()
        builder = BundleBuilder(
            InstalledMetadataProvider(dirs),
            features=_split_features(features) or config.features,
            preferences=list(prefer) or config.prefer,
            ignored_packages=list(ignored) + (config.ignored_packages or []),
            diagnostics=diagnostics,
        )
        new_bundle = builder.build(previous)

        DiagnosticsFormatter(_console, verbosity).format_diagnostics(diagnostics)
        BundleSummaryFormatter(_console, verbosity).format_bundle(new_bundle)
        _write_bundle(new_bundle, fmt, output, verbosity)

        if check and previous is not None:
            result = new_bundle.check_subset(previous)
            BundleSummaryFormatter(_console, verbosity).format_subset_result(result)
            if not result.ok:
                sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except LicenseBundlerError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)


@main.command()
@click.argument("previous_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("candidate_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "input_format",
    type=click.Choice(_FORMAT_NAMES, case_sensitive=False),
    default=None,
    help="Format of both bundles (default: from each file extension, else json).",
)
def check(previous_path: str, candidate_path: str, input_format: str | None) -> None:
    """Check that PREVIOUS_PATH is a subset of CANDIDATE_PATH.

    Every package of the previous bundle must be present and unchanged in
    the candidate bundle. Exits with 1 if not.

    \b
    Examples:
        license-bundler check THIRDPARTY.old.json THIRDPARTY.json
    """
    fmt = Format.parse(input_format) if input_format else None
    try:
        previous = load_bundle(Path(previous_path), fmt)
        candidate = load_bundle(Path(candidate_path), fmt)
    except LicenseBundlerError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    result = candidate.check_subset(previous)
    BundleSummaryFormatter(_console).format_subset_result(result)
    sys.exit(EXIT_SUCCESS if result.ok else EXIT_ISSUES)


def _get_verbosity(verbose_flag: bool, quiet_flag: bool) -> Verbosity:
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")
    if quiet_flag:
        return Verbosity.QUIET
    if verbose_flag:
        return Verbosity.VERBOSE
    return Verbosity.NORMAL


def _split_features(features: tuple[str, ...]) -> list[str]:
    """Flatten repeated and comma separated feature names."""
    return [
        name.strip()
        for value in features
        for name in value.split(",")
        if name.strip()
    ]


def _resolve_format(
    output_format: str | None,
    config: BundlerConfig,
    output: str | None,
    previous: str | None,
) -> Format:
    """Pick the bundle format.

    The flag wins, then the config file, then the output or previous file
    extension, then JSON.
    """
    if output_format:
        return Format.parse(output_format)
    if config.format:
        return Format.parse(config.format)
    for path in (output, previous):
        if path:
            inferred = Format.from_path(Path(path))
            if inferred is not None:
                return inferred
    return Format.parse(DEFAULT_FORMAT)


def _load_previous(
    previous_file: str | None, fmt: Format, verbosity: Verbosity
) -> Optional[Bundle]:
    """Load the previous bundle, if there is one yet.

    A previous path that does not exist is treated as a first run.
    """
    if previous_file is None:
        return None
    path = Path(previous_file)
    if not path.exists():
        if verbosity == Verbosity.VERBOSE:
            _console.print(
                f"[blue]No previous bundle at {escape(previous_file)}, "
                "starting fresh[/blue]"
            )
        return None
    return load_bundle(path, Format.from_path(path) or fmt)


def _write_bundle(
    bundle: Bundle, fmt: Format, output: str | None, verbosity: Verbosity
) -> None:
    """Write the bundle to a file, or stdout when no file is given.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    content = fmt.serialize(bundle)
    if output is None:
        click.echo(content, nl=False)
        return

    try:
        Path(output).write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{output}': {e}") from e

    if verbosity != Verbosity.QUIET:
        _console.print(f"[green]Bundle written to {escape(output)}[/green]")


def _display_error(error: LicenseBundlerError) -> None:
    """Display error message to user on stderr.

    Args:
        error: The exception that occurred.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"
    _error_console.print(f"[red bold]{escape(message)}[/red bold]")


if __name__ == "__main__":
    main()
