"""Package and dependency graph models.

The graph is what a metadata provider hands to the closure resolver:
packages by id, and for each id its outbound dependency edges tagged by
dependency kind.
"""

from __future__ import annotations

import sysconfig
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from license_bundler.constants import SITE_PACKAGES_PLACEHOLDER
from license_bundler.exceptions import PackageNotFoundError

if TYPE_CHECKING:
    from license_bundler.models.license import License


class DependencyKind(str, Enum):
    """Kind of a dependency edge."""

    NORMAL = "normal"
    BUILD = "build"
    DEV = "dev"


class Package(BaseModel):
    """A package of the project or one of its dependencies."""

    model_config = {"extra": "forbid"}

    id: str = Field(description="Unique package id within the graph")
    name: str = Field(description="Package name as published")
    version: str = Field(description="Package version")
    repository: Optional[str] = Field(
        default=None, description="Source repository URL"
    )
    license: Optional[str] = Field(
        default=None, description="License declaration as written by the package"
    )
    license_file: Optional[Path] = Field(
        default=None, description="License file the package points to"
    )
    source_dir: Path = Field(description="Directory searched for license files")

    def resolved_license(self) -> License:
        """Get the License this package declares.

        Returns:
            The parsed declaration, else the license file as a file license,
            else an unspecified license.
        """
        # Lazy import to avoid circular dependency
        from license_bundler.analysis.expression import parse_license
        from license_bundler.models.license import License

        if self.license and self.license.strip():
            return parse_license(self.license)
        if self.license_file is not None:
            return License.file(portable_path(self.license_file))
        return License.unspecified()


def portable_path(path: Path) -> str:
    """Make a path comparable across machines.

    Paths inside the interpreter's site-packages are rewritten relative to
    a ``$SITE_PACKAGES`` placeholder; other paths are kept as-is.
    """
    install_paths = sysconfig.get_paths()
    for key in ("purelib", "platlib"):
        base = install_paths.get(key)
        if not base:
            continue
        try:
            relative = path.relative_to(base)
        except ValueError:
            continue
        return str(PurePosixPath(SITE_PACKAGES_PLACEHOLDER, *relative.parts))
    return str(path)


class DependencyEdge(BaseModel):
    """An outbound dependency of a package."""

    model_config = {"extra": "forbid"}

    package_id: str = Field(description="Id of the depended-on package")
    kinds: list[DependencyKind] = Field(
        default_factory=lambda: [DependencyKind.NORMAL],
        description="Kinds under which the dependency is declared",
    )

    @property
    def is_normal(self) -> bool:
        return DependencyKind.NORMAL in self.kinds


class PackageGraph(BaseModel):
    """Resolved dependency graph of a project."""

    model_config = {"extra": "forbid"}

    packages: dict[str, Package] = Field(
        default_factory=dict, description="Packages by id"
    )
    nodes: dict[str, list[DependencyEdge]] = Field(
        default_factory=dict, description="Outbound edges by package id"
    )

    def add_package(self, package: Package, edges: list[DependencyEdge]) -> None:
        self.packages[package.id] = package
        self.nodes[package.id] = edges

    def by_id(self, package_id: str) -> Package:
        """Get a package by id.

        Raises:
            PackageNotFoundError: If the id is not in the graph.
        """
        try:
            return self.packages[package_id]
        except KeyError:
            raise PackageNotFoundError(package_id) from None

    def deps_of(self, package_id: str) -> list[DependencyEdge]:
        """Get the outbound edges of a package.

        Raises:
            PackageNotFoundError: If the id has no node in the graph.
        """
        try:
            return self.nodes[package_id]
        except KeyError:
            raise PackageNotFoundError(package_id) from None
