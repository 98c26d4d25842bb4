"""License discovery, scoring and reconciliation for license-bundler."""
from license_bundler.analysis.backfill import apply_previous_texts
from license_bundler.analysis.confidence import (
    HIGH_CONFIDENCE_LIMIT,
    LOW_CONFIDENCE_LIMIT,
    Confidence,
    LicenseText,
    check_against_template,
)
from license_bundler.analysis.discovery import find_package_license
from license_bundler.analysis.expression import (
    license_from_classifiers,
    parse_license,
)
from license_bundler.analysis.found import FoundLicense, FoundText
from license_bundler.analysis.preference import apply_license_preferences
from license_bundler.analysis.selection import BestChoice, ChoiceKind, choose

__all__ = [
    "BestChoice",
    "ChoiceKind",
    "Confidence",
    "FoundLicense",
    "FoundText",
    "HIGH_CONFIDENCE_LIMIT",
    "LOW_CONFIDENCE_LIMIT",
    "LicenseText",
    "apply_license_preferences",
    "apply_previous_texts",
    "check_against_template",
    "choose",
    "find_package_license",
    "license_from_classifiers",
    "parse_license",
]
