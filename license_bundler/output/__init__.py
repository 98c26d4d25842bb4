"""Bundle encodings and terminal formatters for license-bundler."""

from license_bundler.output.formats import Format, load_bundle
from license_bundler.output.terminal import (
    BundleSummaryFormatter,
    DiagnosticsFormatter,
    Verbosity,
)

__all__ = [
    "BundleSummaryFormatter",
    "DiagnosticsFormatter",
    "Format",
    "Verbosity",
    "load_bundle",
]
