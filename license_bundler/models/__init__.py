"""Pydantic data models for license-bundler."""

from license_bundler.models.bundle import Bundle, SubsetCheckResult, SubsetMismatch
from license_bundler.models.config import BundlerConfig
from license_bundler.models.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    Diagnostics,
)
from license_bundler.models.finalized import (
    FinalizedLicense,
    LicenseAndText,
    LicenseKey,
    finalized_licenses_lookup,
)
from license_bundler.models.license import KnownLicense, License, LicenseKind
from license_bundler.models.package import (
    DependencyEdge,
    DependencyKind,
    Package,
    PackageGraph,
)

__all__ = [
    "Bundle",
    "BundlerConfig",
    "DependencyEdge",
    "DependencyKind",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "Diagnostics",
    "FinalizedLicense",
    "KnownLicense",
    "License",
    "LicenseAndText",
    "LicenseKey",
    "LicenseKind",
    "Package",
    "PackageGraph",
    "SubsetCheckResult",
    "SubsetMismatch",
    "finalized_licenses_lookup",
]
