"""Base metadata provider interface."""

from abc import ABC, abstractmethod
from typing import Optional

from license_bundler.models.package import Package, PackageGraph


class MetadataProvider(ABC):
    """Abstract source of project packages and their dependency graph.

    The bundler depends only on this interface, not on how the metadata
    is obtained.
    """

    @abstractmethod
    def get_package_roots(self, features: Optional[list[str]] = None) -> list[Package]:
        """Get the root packages of the project.

        Args:
            features: Optional dependency groups (extras) to enable on the
                roots.

        Returns:
            The root packages, also present in the graph.

        Raises:
            ResolutionError: If the project metadata is unusable.
        """

    @abstractmethod
    def get_graph(self) -> PackageGraph:
        """Get the resolved dependency graph.

        Returns:
            PackageGraph of every package reachable from the roots.

        Raises:
            ResolutionError: If the graph cannot be resolved.
        """
