"""Back-fill of missing license texts from a previous bundle."""

from __future__ import annotations

from license_bundler.constants import LICENSE_NOT_FOUND_TEXT
from license_bundler.models.bundle import Bundle
from license_bundler.models.diagnostics import DiagnosticCode, Diagnostics
from license_bundler.models.finalized import (
    FinalizedLicense,
    finalized_licenses_lookup,
)


def apply_previous_texts(
    licenses: list[FinalizedLicense],
    previous: Bundle,
    diagnostics: Diagnostics,
) -> list[FinalizedLicense]:
    """Fill NOT FOUND texts with the text stored in a previous bundle.

    A text is copied only from the same package, version and license, and
    only when the previous text is not NOT FOUND itself. This keeps texts
    added to a bundle by hand across runs.

    Args:
        licenses: Finalized licenses of the new bundle, updated in place.
        previous: The previous bundle.
        diagnostics: Collector receiving one info per copied text.

    Returns:
        The same list, for chaining.
    """
    lookup = finalized_licenses_lookup(previous.third_party_libraries)
    for finalized in licenses:
        if not finalized.has_missing_text:
            continue
        previous_licenses = lookup.get(finalized.key)
        if previous_licenses is None:
            continue
        for entry in finalized.licenses:
            if not entry.is_missing:
                continue
            previous_entry = previous_licenses.get(entry.license)
            if previous_entry is None or previous_entry.is_missing:
                continue
            entry.text = previous_entry.text
            diagnostics.info(
                DiagnosticCode.PREVIOUS_TEXT_USED,
                f"Using previous license text for {entry.license} license "
                f"{finalized.package_name}:{finalized.package_version}",
                package_name=finalized.package_name,
                package_version=finalized.package_version,
                license=entry.license,
            )
    return licenses
