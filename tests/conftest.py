"""Shared fixtures for license-bundler tests."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from click.testing import CliRunner

from license_bundler.models.license import KnownLicense, License, load_template
from license_bundler.models.package import (
    DependencyEdge,
    DependencyKind,
    Package,
    PackageGraph,
)
from license_bundler.resolvers.static import StaticMetadataProvider

PackageFactory = Callable[..., Package]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mit_text() -> str:
    """MIT license text with the placeholders filled in."""
    return (
        License.of(KnownLicense.MIT)
        .template.replace("<year>", "2021")  # type: ignore[union-attr]
        .replace("<copyright holders>", "Jane Doe")
    )


@pytest.fixture
def apache_text() -> str:
    """Apache-2.0 license text."""
    return load_template("Apache-2.0.txt")


@pytest.fixture
def make_package(tmp_path: Path) -> PackageFactory:
    """Factory creating packages whose license directory lives in tmp_path.

    ``files`` maps file names to contents written into the package's
    source directory.
    """

    def _make(
        name: str = "demo",
        version: str = "1.0.0",
        license: Optional[str] = None,
        files: Optional[dict[str, str]] = None,
        license_file: Optional[str] = None,
        repository: Optional[str] = None,
    ) -> Package:
        source_dir = tmp_path / f"{name}-{version}"
        source_dir.mkdir(parents=True, exist_ok=True)
        for file_name, content in (files or {}).items():
            (source_dir / file_name).write_text(content, encoding="utf-8")
        return Package(
            id=f"{name} {version}",
            name=name,
            version=version,
            repository=repository,
            license=license,
            license_file=source_dir / license_file if license_file else None,
            source_dir=source_dir,
        )

    return _make


@pytest.fixture
def provider(
    make_package: PackageFactory, mit_text: str, apache_text: str
) -> StaticMetadataProvider:
    """Provider for a small project.

    ``app`` depends on ``alpha`` (MIT, found), ``beta`` (MIT OR Apache-2.0,
    both found) and ``gamma`` (ISC, no text shipped). ``pytest-tool`` is a
    dev dependency and ``delta`` (MIT) is only pulled in by the ``extra``
    feature.
    """
    app = make_package("app", "0.1.0", license="MIT")
    alpha = make_package(
        "alpha",
        "1.2.0",
        license="MIT",
        files={"LICENSE": mit_text},
        repository="https://github.com/example/alpha",
    )
    beta = make_package(
        "beta",
        "2.0.0",
        license="MIT OR Apache-2.0",
        files={"LICENSE-MIT": mit_text, "LICENSE-APACHE": apache_text},
    )
    gamma = make_package("gamma", "0.3.0", license="ISC")
    delta = make_package("delta", "4.0.0", license="MIT", files={"COPYING": mit_text})
    tool = make_package("pytest-tool", "8.0.0", license="MIT")

    graph = PackageGraph()
    graph.add_package(
        app,
        [
            DependencyEdge(package_id=gamma.id),
            DependencyEdge(package_id=alpha.id),
            DependencyEdge(package_id=tool.id, kinds=[DependencyKind.DEV]),
        ],
    )
    graph.add_package(alpha, [DependencyEdge(package_id=beta.id)])
    graph.add_package(beta, [])
    graph.add_package(gamma, [DependencyEdge(package_id=alpha.id)])
    graph.add_package(delta, [])
    graph.add_package(tool, [])
    return StaticMetadataProvider(
        graph, [app.id], features={"extra": [DependencyEdge(package_id=delta.id)]}
    )
