"""Metadata provider for a project and its installed dependencies.

Reads the root projects from their pyproject.toml and follows requirements
through the distributions installed in the current environment.
"""
from __future__ import annotations

import tomllib
from importlib.metadata import Distribution, distributions
from pathlib import Path
from typing import Any, Iterable, Optional

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from license_bundler.analysis.expression import license_from_classifiers
from license_bundler.exceptions import PackageNotFoundError, ResolutionError
from license_bundler.models.package import (
    DependencyEdge,
    DependencyKind,
    Package,
    PackageGraph,
)
from license_bundler.resolvers.base import MetadataProvider

# Project-URL labels that point at the source repository, in priority order
REPOSITORY_LABELS = ["repository", "source", "source code", "github", "homepage"]

# Version used for a root project whose version is dynamic and not installed
UNKNOWN_VERSION = "0.0.0"


def _package_id(name: str, version: str) -> str:
    return f"{canonicalize_name(name)} {version}"


def _applies(requirement: Requirement, extras: Iterable[str] = ()) -> bool:
    """Check if a requirement applies with no extra or with one of ``extras``."""
    if requirement.marker is None:
        return True
    return any(
        requirement.marker.evaluate({"extra": extra}) for extra in ("", *extras)
    )


def _parse_requirement(value: str) -> Optional[Requirement]:
    try:
        return Requirement(value)
    except InvalidRequirement:
        # Skip malformed requirements
        return None


def _dist_info_dir(dist: Distribution) -> Path:
    """Locate the metadata directory of an installed distribution."""
    for file in dist.files or []:
        if file.name == "METADATA" and file.parent.name.endswith(".dist-info"):
            return Path(str(dist.locate_file(file))).parent
    raise ResolutionError(
        f"Cannot locate metadata directory of {dist.metadata['Name']}"
    )


def _repository_from_metadata(metadata: Any) -> Optional[str]:
    urls: dict[str, str] = {}
    for entry in metadata.get_all("Project-URL") or []:
        label, _, url = entry.partition(",")
        urls.setdefault(label.strip().lower(), url.strip())
    for label in REPOSITORY_LABELS:
        if urls.get(label):
            return urls[label]
    home_page = metadata.get("Home-page")
    if home_page and home_page.strip() and home_page.strip() != "UNKNOWN":
        return home_page.strip()
    return None


def _license_from_metadata(metadata: Any) -> Optional[str]:
    """Get the license declaration of a distribution.

    Prefers License-Expression, then a single-line License field, then the
    trove classifiers.
    """
    expression = metadata.get("License-Expression")
    if expression and expression.strip():
        return expression.strip()
    declared = metadata.get("License")
    if declared and declared.strip() and declared.strip() != "UNKNOWN":
        if "\n" not in declared.strip():
            return declared.strip()
    return license_from_classifiers(metadata.get_all("Classifier") or [])


def package_from_distribution(dist: Distribution) -> Package:
    """Build a Package from installed distribution metadata.

    Args:
        dist: An installed distribution.

    Returns:
        Package whose source directory is the ``licenses`` folder of the
        dist-info directory when present, else the dist-info directory.
    """
    metadata = dist.metadata
    name = metadata["Name"]
    version = metadata["Version"]
    info_dir = _dist_info_dir(dist)
    licenses_dir = info_dir / "licenses"
    source_dir = licenses_dir if licenses_dir.is_dir() else info_dir

    license_file: Optional[Path] = None
    license_files = metadata.get_all("License-File") or []
    if license_files:
        license_file = source_dir / license_files[0]
        if not license_file.exists():
            license_file = info_dir / license_files[0]

    return Package(
        id=_package_id(name, version),
        name=name,
        version=version,
        repository=_repository_from_metadata(metadata),
        license=_license_from_metadata(metadata),
        license_file=license_file,
        source_dir=source_dir,
    )


class _Project:
    """A root project read from its pyproject.toml."""

    def __init__(self, project_dir: Path, data: dict[str, Any]) -> None:
        self.project_dir = project_dir
        self.data = data
        self.project: dict[str, Any] = data["project"]
        self.name: str = self.project["name"]

    @property
    def optional_dependencies(self) -> dict[str, list[str]]:
        extras = self.project.get("optional-dependencies") or {}
        return {canonicalize_name(name): deps for name, deps in extras.items()}

    def requirements(self, features: Iterable[str]) -> list[tuple[str, DependencyKind]]:
        """Requirement strings of the project tagged by dependency kind."""
        requirements = [
            (value, DependencyKind.NORMAL)
            for value in self.project.get("dependencies") or []
        ]
        extras = self.optional_dependencies
        for feature in features:
            requirements.extend(
                (value, DependencyKind.NORMAL) for value in extras.get(feature, [])
            )
        build_system = self.data.get("build-system") or {}
        requirements.extend(
            (value, DependencyKind.BUILD)
            for value in build_system.get("requires") or []
        )
        for group in (self.data.get("dependency-groups") or {}).values():
            # Group includes are tables, not requirement strings
            requirements.extend(
                (value, DependencyKind.DEV) for value in group if isinstance(value, str)
            )
        return requirements

    def license(self) -> tuple[Optional[str], Optional[Path]]:
        declared = self.project.get("license")
        if isinstance(declared, str):
            return declared, None
        if isinstance(declared, dict):
            if declared.get("text"):
                return str(declared["text"]), None
            if declared.get("file"):
                return None, self.project_dir / str(declared["file"])
        return None, None

    def repository(self) -> Optional[str]:
        urls = {
            label.strip().lower(): url
            for label, url in (self.project.get("urls") or {}).items()
        }
        for label in REPOSITORY_LABELS:
            if urls.get(label):
                return urls[label]
        return None


class InstalledMetadataProvider(MetadataProvider):
    """Provider reading pyproject.toml files and installed distributions.

    Args:
        project_dirs: Directories holding the root pyproject.toml files.
            Defaults to the current working directory.
        paths: Optional search path for installed distributions. Defaults
            to ``sys.path``.
    """

    def __init__(
        self,
        project_dirs: Optional[list[Path]] = None,
        paths: Optional[list[str]] = None,
    ) -> None:
        self._project_dirs = project_dirs or [Path.cwd()]
        self._paths = paths
        self._projects: Optional[list[_Project]] = None
        self._features: list[str] = []
        self._graph: Optional[PackageGraph] = None
        self._roots: list[Package] = []

    def _load_projects(self) -> list[_Project]:
        if self._projects is not None:
            return self._projects

        projects: list[_Project] = []
        for project_dir in self._project_dirs:
            pyproject = project_dir / "pyproject.toml"
            try:
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
            except OSError as e:
                raise ResolutionError(f"Cannot read '{pyproject}': {e}") from e
            except tomllib.TOMLDecodeError as e:
                raise ResolutionError(f"Invalid TOML in '{pyproject}': {e}") from e

            project = data.get("project")
            if not isinstance(project, dict) or not project.get("name"):
                raise ResolutionError(f"No [project].name in '{pyproject}'")
            projects.append(_Project(project_dir, data))

        self._projects = projects
        return projects

    def _installed(self) -> dict[str, Distribution]:
        installed: dict[str, Distribution] = {}
        search = {} if self._paths is None else {"path": self._paths}
        for dist in distributions(**search):
            name = dist.metadata["Name"]
            if name:
                # First match on the search path wins, as for imports
                installed.setdefault(canonicalize_name(name), dist)
        return installed

    def get_package_roots(self, features: Optional[list[str]] = None) -> list[Package]:
        projects = self._load_projects()
        requested = [canonicalize_name(feature) for feature in features or []]
        for feature in requested:
            if not any(feature in p.optional_dependencies for p in projects):
                raise ResolutionError(f"Unknown feature '{feature}'")

        if self._graph is None or requested != self._features:
            self._features = requested
            self._graph = self._build_graph(projects)
        return list(self._roots)

    def get_graph(self) -> PackageGraph:
        if self._graph is None:
            self._graph = self._build_graph(self._load_projects())
        return self._graph

    def _build_graph(self, projects: list[_Project]) -> PackageGraph:
        """Resolve the graph of the root projects.

        Runtime requirements are followed transitively and must be
        installed, along with the requirements of any extras named by
        their dependents. Build and dev requirements are recorded as edges of the
        roots only when installed, without their own dependencies, since
        the closure never follows them.
        """
        installed = self._installed()
        graph = PackageGraph()
        ids: dict[str, str] = {}
        pending: list[Distribution] = []
        added: dict[str, Distribution] = {}
        # Extras requested of each distribution by its dependents
        extras: dict[str, set[str]] = {}

        def add_distribution(dist: Distribution) -> str:
            package = package_from_distribution(dist)
            name = canonicalize_name(package.name)
            ids[name] = package.id
            added[name] = dist
            graph.add_package(package, [])
            return package.id

        def resolve_runtime(requirement: Requirement) -> str:
            name = canonicalize_name(requirement.name)
            requested = {canonicalize_name(extra) for extra in requirement.extras}
            if name in ids:
                known = extras.setdefault(name, set())
                if name in added and not requested <= known:
                    # Revisit to follow the requirements of the new extras
                    known |= requested
                    pending.append(added[name])
                return ids[name]
            dist = installed.get(name)
            if dist is None:
                raise PackageNotFoundError(requirement.name)
            extras[name] = requested
            pending.append(dist)
            return add_distribution(dist)

        self._roots = []
        for project in projects:
            root = self._root_package(project, installed)
            ids[canonicalize_name(project.name)] = root.id
            graph.add_package(root, [])
            self._roots.append(root)

        tooling: list[tuple[str, Requirement, DependencyKind]] = []
        for project, root in zip(projects, self._roots):
            features = [f for f in self._features if f in project.optional_dependencies]
            for value, kind in project.requirements(features):
                requirement = _parse_requirement(value)
                if requirement is None:
                    continue
                if not _applies(requirement):
                    continue
                if kind == DependencyKind.NORMAL:
                    _add_edge(graph, root.id, resolve_runtime(requirement), kind)
                else:
                    tooling.append((root.id, requirement, kind))

        while pending:
            dist = pending.pop()
            name = canonicalize_name(dist.metadata["Name"])
            package_id = ids[name]
            requested = sorted(extras.get(name, ()))
            for value in dist.requires or []:
                requirement = _parse_requirement(value)
                if requirement is None or not _applies(requirement, requested):
                    continue
                dep_id = resolve_runtime(requirement)
                if dep_id != package_id:
                    _add_edge(graph, package_id, dep_id, DependencyKind.NORMAL)

        for root_id, requirement, kind in tooling:
            name = canonicalize_name(requirement.name)
            if name not in ids:
                dist = installed.get(name)
                if dist is None:
                    # Build and dev tools need not be installed
                    continue
                add_distribution(dist)
            _add_edge(graph, root_id, ids[name], kind)

        return graph

    def _root_package(
        self, project: _Project, installed: dict[str, Distribution]
    ) -> Package:
        version = project.project.get("version")
        if not version:
            dist = installed.get(canonicalize_name(project.name))
            version = dist.metadata["Version"] if dist is not None else UNKNOWN_VERSION
        license, license_file = project.license()
        return Package(
            id=_package_id(project.name, version),
            name=project.name,
            version=version,
            repository=project.repository(),
            license=license,
            license_file=license_file,
            source_dir=project.project_dir,
        )


def _add_edge(
    graph: PackageGraph, from_id: str, to_id: str, kind: DependencyKind
) -> None:
    """Add an edge, merging kinds when the dependency is already present."""
    edges = graph.nodes[from_id]
    for edge in edges:
        if edge.package_id == to_id:
            if kind not in edge.kinds:
                edge.kinds.append(kind)
            return
    edges.append(DependencyEdge(package_id=to_id, kinds=[kind]))
