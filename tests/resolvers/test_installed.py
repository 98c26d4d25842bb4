"""Tests for the installed distribution metadata provider."""
from __future__ import annotations

import textwrap
from importlib.metadata import distributions
from pathlib import Path
from typing import Optional

import pytest

from license_bundler.exceptions import PackageNotFoundError, ResolutionError
from license_bundler.models.package import DependencyKind
from license_bundler.resolvers.closure import get_root_dependencies
from license_bundler.resolvers.installed import (
    UNKNOWN_VERSION,
    InstalledMetadataProvider,
    package_from_distribution,
)

PYPROJECT = """
[build-system]
requires = ["builder"]

[project]
name = "app"
version = "0.1.0"
license = "MIT"
dependencies = ["alpha>=1.0", "legacy; python_version < '3'"]

[project.optional-dependencies]
speed = ["delta"]

[project.urls]
Repository = "https://github.com/example/app"

[dependency-groups]
dev = ["tester", "not-installed-tool"]
"""


def _install(
    site: Path,
    name: str,
    version: str,
    *headers: str,
    files: Optional[dict[str, str]] = None,
    licenses: Optional[dict[str, str]] = None,
) -> Path:
    """Create a dist-info directory as an installer would."""
    info = site / f"{name}-{version}.dist-info"
    info.mkdir(parents=True)
    metadata = ["Metadata-Version: 2.4", f"Name: {name}", f"Version: {version}"]
    metadata.extend(headers)
    (info / "METADATA").write_text("\n".join(metadata) + "\n\n", encoding="utf-8")

    record = [f"{info.name}/METADATA,,", f"{info.name}/RECORD,,"]
    for file_name, content in (files or {}).items():
        (info / file_name).write_text(content, encoding="utf-8")
        record.append(f"{info.name}/{file_name},,")
    if licenses:
        (info / "licenses").mkdir()
        for file_name, content in licenses.items():
            (info / "licenses" / file_name).write_text(content, encoding="utf-8")
            record.append(f"{info.name}/licenses/{file_name},,")
    (info / "RECORD").write_text("\n".join(record) + "\n", encoding="utf-8")
    return info


def _project(tmp_path: Path, content: str = PYPROJECT, name: str = "project") -> Path:
    project_dir = tmp_path / name
    project_dir.mkdir()
    (project_dir / "pyproject.toml").write_text(
        textwrap.dedent(content), encoding="utf-8"
    )
    return project_dir


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Site directory with the distributions used by PYPROJECT."""
    site = tmp_path / "site"
    _install(
        site,
        "alpha",
        "1.2.0",
        "License: MIT",
        "Requires-Dist: beta>=1.0",
        'Requires-Dist: gamma; extra == "speed"',
        "Project-URL: Source, https://github.com/example/alpha",
    )
    _install(site, "beta", "2.0.0", "License-Expression: Apache-2.0")
    _install(site, "delta", "0.5.0", "License: ISC")
    _install(site, "builder", "60.0", "Requires-Dist: missing-dep")
    _install(site, "tester", "8.0")
    return site


def _provider(project_dir: Path, site: Path) -> InstalledMetadataProvider:
    return InstalledMetadataProvider([project_dir], paths=[str(site)])


def _closure_names(provider: InstalledMetadataProvider, features=None) -> list[str]:
    roots = provider.get_package_roots(features)
    packages = get_root_dependencies(provider.get_graph(), roots)
    return sorted(package.name for package in packages)


def _distribution(site: Path, name: str):
    return next(d for d in distributions(path=[str(site)]) if d.metadata["Name"] == name)


class TestPackageFromDistribution:
    """Tests for package_from_distribution."""

    def test_basic_fields(self, tmp_path: Path) -> None:
        """Test name, version, id and license of a distribution."""
        site = tmp_path / "site"
        info = _install(site, "My_Lib", "1.0", "License: MIT")
        package = package_from_distribution(_distribution(site, "My_Lib"))

        assert package.name == "My_Lib"
        assert package.version == "1.0"
        assert package.id == "my-lib 1.0"
        assert package.license == "MIT"
        assert package.source_dir == info

    def test_license_expression_preferred(self, tmp_path: Path) -> None:
        """Test that License-Expression wins over License."""
        site = tmp_path / "site"
        _install(site, "lib", "1.0", "License-Expression: Apache-2.0", "License: MIT")
        package = package_from_distribution(_distribution(site, "lib"))
        assert package.license == "Apache-2.0"

    def test_classifier_fallback(self, tmp_path: Path) -> None:
        """Test that classifiers are used when License is unknown."""
        site = tmp_path / "site"
        _install(
            site,
            "lib",
            "1.0",
            "License: UNKNOWN",
            "Classifier: License :: OSI Approved :: MIT License",
        )
        package = package_from_distribution(_distribution(site, "lib"))
        assert package.license == "MIT"

    def test_no_license(self, tmp_path: Path) -> None:
        """Test a distribution declaring no license at all."""
        site = tmp_path / "site"
        _install(site, "lib", "1.0")
        package = package_from_distribution(_distribution(site, "lib"))
        assert package.license is None
        assert package.license_file is None

    def test_licenses_directory(self, tmp_path: Path) -> None:
        """Test that the licenses folder is searched when present."""
        site = tmp_path / "site"
        info = _install(
            site,
            "lib",
            "1.0",
            "License-File: LICENSE",
            licenses={"LICENSE": "text"},
        )
        package = package_from_distribution(_distribution(site, "lib"))

        assert package.source_dir == info / "licenses"
        assert package.license_file == info / "licenses" / "LICENSE"

    def test_license_file_in_dist_info(self, tmp_path: Path) -> None:
        """Test older layouts with license files beside METADATA."""
        site = tmp_path / "site"
        info = _install(
            site, "lib", "1.0", "License-File: COPYING", files={"COPYING": "text"}
        )
        package = package_from_distribution(_distribution(site, "lib"))

        assert package.source_dir == info
        assert package.license_file == info / "COPYING"

    def test_repository_from_project_urls(self, tmp_path: Path) -> None:
        """Test that the repository label wins over the home page."""
        site = tmp_path / "site"
        _install(
            site,
            "lib",
            "1.0",
            "Home-page: https://example.com",
            "Project-URL: Documentation, https://docs.example.com",
            "Project-URL: Repository, https://github.com/example/lib",
        )
        package = package_from_distribution(_distribution(site, "lib"))
        assert package.repository == "https://github.com/example/lib"

    def test_repository_from_home_page(self, tmp_path: Path) -> None:
        """Test that the home page is the fallback repository."""
        site = tmp_path / "site"
        _install(site, "lib", "1.0", "Home-page: https://example.com")
        package = package_from_distribution(_distribution(site, "lib"))
        assert package.repository == "https://example.com"

    def test_missing_metadata_record(self, tmp_path: Path) -> None:
        """Test that a distribution without a file record is an error."""
        site = tmp_path / "site"
        info = site / "lib-1.0.dist-info"
        info.mkdir(parents=True)
        (info / "METADATA").write_text(
            "Metadata-Version: 2.4\nName: lib\nVersion: 1.0\n\n", encoding="utf-8"
        )
        with pytest.raises(ResolutionError, match="lib"):
            package_from_distribution(_distribution(site, "lib"))


class TestInstalledMetadataProvider:
    """Tests for InstalledMetadataProvider."""

    def test_root_package(self, tmp_path: Path, site: Path) -> None:
        """Test that the root is read from pyproject.toml."""
        project_dir = _project(tmp_path)
        roots = _provider(project_dir, site).get_package_roots()

        assert len(roots) == 1
        root = roots[0]
        assert root.name == "app"
        assert root.version == "0.1.0"
        assert root.license == "MIT"
        assert root.repository == "https://github.com/example/app"
        assert root.source_dir == project_dir

    def test_runtime_closure(self, tmp_path: Path, site: Path) -> None:
        """Test that runtime requirements are followed transitively."""
        provider = _provider(_project(tmp_path), site)
        assert _closure_names(provider) == ["alpha", "app", "beta"]

    def test_graph_before_roots(self, tmp_path: Path, site: Path) -> None:
        """Test that the graph can be requested first."""
        provider = _provider(_project(tmp_path), site)
        graph = provider.get_graph()
        assert "alpha 1.2.0" in graph.packages

    def test_extras_only_requirements_skipped(
        self, tmp_path: Path, site: Path
    ) -> None:
        """Test that requirements of extras nobody requested are ignored."""
        provider = _provider(_project(tmp_path), site)
        graph = provider.get_graph()
        assert all(package.name != "gamma" for package in graph.packages.values())

    def test_feature(self, tmp_path: Path, site: Path) -> None:
        """Test that a root feature adds its optional dependencies."""
        provider = _provider(_project(tmp_path), site)
        assert _closure_names(provider, ["Speed"]) == [
            "alpha",
            "app",
            "beta",
            "delta",
        ]

    def test_unknown_feature(self, tmp_path: Path, site: Path) -> None:
        """Test that a feature no root declares is an error."""
        provider = _provider(_project(tmp_path), site)
        with pytest.raises(ResolutionError, match="turbo"):
            provider.get_package_roots(["turbo"])

    def test_tooling_edges(self, tmp_path: Path, site: Path) -> None:
        """Test that build and dev requirements are recorded but not bundled."""
        provider = _provider(_project(tmp_path), site)
        root = provider.get_package_roots()[0]
        edges = {
            edge.package_id: edge.kinds for edge in provider.get_graph().deps_of(root.id)
        }

        assert edges["alpha 1.2.0"] == [DependencyKind.NORMAL]
        assert edges["builder 60.0"] == [DependencyKind.BUILD]
        assert edges["tester 8.0"] == [DependencyKind.DEV]
        assert "builder" not in _closure_names(provider)

    def test_missing_runtime_dependency(self, tmp_path: Path, site: Path) -> None:
        """Test that a runtime requirement that is not installed is an error."""
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            version = "0.1.0"
            dependencies = ["ghost"]
            """,
        )
        with pytest.raises(PackageNotFoundError, match="ghost"):
            _provider(project_dir, site).get_package_roots()

    def test_dynamic_version_not_installed(self, tmp_path: Path, site: Path) -> None:
        """Test the version of a root that is neither static nor installed."""
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            dynamic = ["version"]
            """,
        )
        root = _provider(project_dir, site).get_package_roots()[0]
        assert root.version == UNKNOWN_VERSION

    def test_dynamic_version_installed(self, tmp_path: Path, site: Path) -> None:
        """Test that an installed root gives its installed version."""
        _install(site, "app", "2.3.4")
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            dynamic = ["version"]
            """,
        )
        root = _provider(project_dir, site).get_package_roots()[0]
        assert root.version == "2.3.4"

    def test_license_table(self, tmp_path: Path, site: Path) -> None:
        """Test the legacy license table forms."""
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            version = "1.0"
            license = {file = "COPYING"}
            """,
        )
        root = _provider(project_dir, site).get_package_roots()[0]
        assert root.license is None
        assert root.license_file == project_dir / "COPYING"

    def test_several_roots(self, tmp_path: Path, site: Path) -> None:
        """Test a workspace of several root projects."""
        api = _project(
            tmp_path,
            """
            [project]
            name = "api"
            version = "1.0"
            dependencies = ["beta"]
            """,
            name="api",
        )
        cli = _project(
            tmp_path,
            """
            [project]
            name = "cli"
            version = "1.0"
            dependencies = ["delta"]
            """,
            name="cli",
        )
        provider = InstalledMetadataProvider([api, cli], paths=[str(site)])

        assert [root.name for root in provider.get_package_roots()] == ["api", "cli"]
        assert _closure_names(provider) == ["api", "beta", "cli", "delta"]

    def test_missing_pyproject(self, tmp_path: Path, site: Path) -> None:
        """Test that a directory without pyproject.toml is an error."""
        with pytest.raises(ResolutionError, match="Cannot read"):
            _provider(tmp_path, site).get_package_roots()

    def test_invalid_pyproject(self, tmp_path: Path, site: Path) -> None:
        """Test that malformed TOML is an error."""
        project_dir = _project(tmp_path, "[project\nname = ")
        with pytest.raises(ResolutionError, match="Invalid TOML"):
            _provider(project_dir, site).get_package_roots()

    def test_missing_project_name(self, tmp_path: Path, site: Path) -> None:
        """Test that a pyproject.toml without a project name is an error."""
        project_dir = _project(tmp_path, "[tool.other]\nkey = 1\n")
        with pytest.raises(ResolutionError, match="No \\[project\\].name"):
            _provider(project_dir, site).get_package_roots()

    def test_requested_extras_followed(self, tmp_path: Path) -> None:
        """Test that extras named in a requirement pull in their dependencies."""
        site = tmp_path / "site"
        _install(
            site,
            "web",
            "1.0",
            'Requires-Dist: speedups; extra == "fast"',
            'Requires-Dist: tracing; extra == "debug"',
        )
        _install(site, "speedups", "2.0")
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            version = "0.1.0"
            dependencies = ["web[fast]"]
            """,
        )
        provider = _provider(project_dir, site)
        assert _closure_names(provider) == ["app", "speedups", "web"]

    def test_extras_requested_by_later_dependent(self, tmp_path: Path) -> None:
        """Test that an extra requested after the distribution was seen is followed."""
        site = tmp_path / "site"
        _install(site, "web", "1.0", 'Requires-Dist: speedups; extra == "fast"')
        _install(site, "plugin", "1.0", "Requires-Dist: web[fast]")
        _install(site, "speedups", "2.0")
        project_dir = _project(
            tmp_path,
            """
            [project]
            name = "app"
            version = "0.1.0"
            dependencies = ["web", "plugin"]
            """,
        )
        provider = _provider(project_dir, site)
        assert _closure_names(provider) == ["app", "plugin", "speedups", "web"]
