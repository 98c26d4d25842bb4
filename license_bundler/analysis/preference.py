"""Preferred license selection for packages offering a choice of licenses."""

from __future__ import annotations

import re

from license_bundler.analysis.expression import parse_license
from license_bundler.analysis.found import FoundLicense
from license_bundler.models.finalized import FinalizedLicense

_AND_TOKEN = re.compile(r"\bAND\b", re.IGNORECASE)


def normalize_preferences(preferences: list[str]) -> list[str]:
    """Canonicalize preferred licenses, e.g. "GPL-2.0" to "GPL-2.0-only"."""
    return [str(parse_license(preference)) for preference in preferences]


def apply_license_preferences(
    licenses: list[FinalizedLicense],
    found: list[FoundLicense],
    preferences: list[str],
) -> list[FinalizedLicense]:
    """Keep only the preferred license of packages offering a choice.

    Applies to packages whose resolved license is multiple and whose
    declaration does not contain AND. Declarations with AND are left as-is
    since conjunctions are not decomposed.

    Args:
        licenses: Finalized licenses, parallel to ``found``.
        found: Found licenses the finalized licenses were built from.
        preferences: Preferred licenses, most preferred first.

    Returns:
        New list where each affected package carries only the first
        preferred license present among its alternatives.
    """
    if not preferences:
        return list(licenses)

    ordered = normalize_preferences(preferences)
    result: list[FinalizedLicense] = []
    for finalized, found_license in zip(licenses, found):
        declaration = found_license.package.license or ""
        if not found_license.license.is_multiple or _AND_TOKEN.search(declaration):
            result.append(finalized)
            continue

        alternatives = {str(member) for member in found_license.license.members}
        preferred = next((p for p in ordered if p in alternatives), None)
        if preferred is None:
            result.append(finalized)
            continue

        result.append(
            finalized.model_copy(
                update={
                    "license": preferred,
                    "licenses": [
                        entry for entry in finalized.licenses
                        if entry.license == preferred
                    ],
                }
            )
        )
    return result
