"""In-memory metadata provider."""

from __future__ import annotations

from typing import Optional

from license_bundler.exceptions import ResolutionError
from license_bundler.models.package import DependencyEdge, Package, PackageGraph
from license_bundler.resolvers.base import MetadataProvider


class StaticMetadataProvider(MetadataProvider):
    """Provider over an already built graph.

    Args:
        graph: The dependency graph.
        roots: Ids of the root packages.
        features: Optional edges added to the roots per feature name.
    """

    def __init__(
        self,
        graph: PackageGraph,
        roots: list[str],
        features: Optional[dict[str, list[DependencyEdge]]] = None,
    ) -> None:
        self._graph = graph
        self._roots = roots
        self._features = features or {}

    def get_package_roots(self, features: Optional[list[str]] = None) -> list[Package]:
        for feature in features or []:
            edges = self._features.get(feature)
            if edges is None:
                raise ResolutionError(f"Unknown feature '{feature}'")
            for root in self._roots:
                known = {edge.package_id for edge in self._graph.deps_of(root)}
                self._graph.nodes[root].extend(
                    edge for edge in edges if edge.package_id not in known
                )
        return [self._graph.by_id(root) for root in self._roots]

    def get_graph(self) -> PackageGraph:
        return self._graph
