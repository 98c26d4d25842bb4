"""Bundle assembly from a project's dependency graph."""

from __future__ import annotations

from typing import Optional

from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion, Version

from license_bundler.analysis.backfill import apply_previous_texts
from license_bundler.analysis.found import FoundLicense
from license_bundler.analysis.preference import apply_license_preferences
from license_bundler.models.bundle import Bundle
from license_bundler.models.diagnostics import Diagnostics
from license_bundler.models.package import Package
from license_bundler.resolvers.base import MetadataProvider
from license_bundler.resolvers.closure import get_root_dependencies


class BundleBuilder:
    """Builds the license bundle of a project.

    Args:
        provider: Source of the root packages and dependency graph.
        features: Optional dependency groups (extras) of the roots to include.
        preferences: Preferred licenses, most preferred first.
        ignored_packages: Package names left out of the bundle.
        diagnostics: Collector for warnings; a new one is created if None.
    """

    def __init__(
        self,
        provider: MetadataProvider,
        features: Optional[list[str]] = None,
        preferences: Optional[list[str]] = None,
        ignored_packages: Optional[list[str]] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.provider = provider
        self.features = features or []
        self.preferences = preferences or []
        self.ignored_packages = {
            canonicalize_name(name) for name in ignored_packages or []
        }
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def dependencies(self, roots: list[Package]) -> list[Package]:
        """Get the packages to bundle: the runtime closure minus the roots.

        Args:
            roots: Root packages of the project.

        Returns:
            Packages sorted by name then version without duplicates.
        """
        root_names = {root.name for root in roots}
        packages: dict[tuple[str, str], Package] = {}
        for package in get_root_dependencies(self.provider.get_graph(), roots):
            if package.name in root_names:
                continue
            if canonicalize_name(package.name) in self.ignored_packages:
                continue
            packages.setdefault((package.name, package.version), package)
        return [packages[key] for key in sorted(packages, key=_sort_key)]

    def build(self, previous: Optional[Bundle] = None) -> Bundle:
        """Build the bundle.

        Args:
            previous: Optional previous bundle to back-fill missing texts from.

        Returns:
            The new Bundle.

        Raises:
            ResolutionError: If the dependency graph cannot be resolved.
            DiscoveryError: If a package's license directory cannot be listed.
        """
        roots = self.provider.get_package_roots(self.features)
        packages = self.dependencies(roots)

        found = [FoundLicense.from_package(p, self.diagnostics) for p in packages]
        for found_license in found:
            found_license.check(self.diagnostics)

        licenses = [found_license.finalize() for found_license in found]
        licenses = apply_license_preferences(licenses, found, self.preferences)
        if previous is not None:
            apply_previous_texts(licenses, previous, self.diagnostics)

        return Bundle.from_roots(roots, licenses)


def _sort_key(key: tuple[str, str]) -> tuple[str, int, object]:
    """Order by name, then by parsed version; invalid versions sort last."""
    name, version = key
    try:
        return (name, 0, Version(version))
    except InvalidVersion:
        return (name, 1, version)
