"""Runtime dependency closure of the root packages."""

from __future__ import annotations

from license_bundler.models.package import Package, PackageGraph


def get_root_dependencies(graph: PackageGraph, roots: list[Package]) -> list[Package]:
    """Collect every package reachable from the roots through normal edges.

    Build and dev edges are not followed. Each package is visited once.

    Args:
        graph: Resolved dependency graph.
        roots: Root packages to start from.

    Returns:
        The roots and all their runtime dependencies, in visit order.

    Raises:
        PackageNotFoundError: If an id in the graph has no package or node.
    """
    visited: set[str] = set()
    packages: list[Package] = []
    stack = [root.id for root in reversed(roots)]
    while stack:
        package_id = stack.pop()
        if package_id in visited:
            continue
        visited.add(package_id)
        packages.append(graph.by_id(package_id))
        for edge in reversed(graph.deps_of(package_id)):
            if edge.is_normal and edge.package_id not in visited:
                stack.append(edge.package_id)
    return packages
