"""License text discovery in a package's source directory.

Files are matched by slugified name against the synonyms of the expected
license. A generic LICENSE/COPYING file is only used when nothing more
specific is present.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from license_bundler.analysis.confidence import (
    Confidence,
    LicenseText,
    check_against_template,
)
from license_bundler.exceptions import DiscoveryError
from license_bundler.models.diagnostics import DiagnosticCode, Diagnostics
from license_bundler.models.license import License, LicenseKind, slugify
from license_bundler.models.package import Package

# Upper-cased file names accepted as a generic license file
GENERIC_LICENSE_NAMES = frozenset(
    {"LICENSE", "LICENCE", "LICENSE.MD", "LICENSE.TXT", "COPYING"}
)

# Slug patterns a license file name may take, "{}" being a license synonym
_NAME_PATTERNS = (
    "{}",
    "license-{}",
    "license-{}-md",
    "license-{}-txt",
    "{}-license",
    "{}-license-md",
    "{}-license-txt",
)


def is_generic_license_name(name: str) -> bool:
    """Check if a file name is one of the generic license file names."""
    return name.upper() in GENERIC_LICENSE_NAMES


def name_matches(name: str, license: License) -> bool:
    """Check if a file name plausibly holds the text of a license.

    Args:
        name: File name, e.g. "LICENSE-MIT.txt".
        license: Expected license. Custom licenses match on their own text.

    Returns:
        True if the slugified name matches a synonym pattern.
    """
    slug = slugify(name)
    if license.kind == LicenseKind.CUSTOM:
        synonyms = [slugify(license.text or "")]
    else:
        synonyms = license.synonyms()
    return any(
        slug == pattern.format(synonym)
        for synonym in synonyms
        if synonym
        for pattern in _NAME_PATTERNS
    )


def find_package_license(
    package: Package,
    license: License,
    diagnostics: Optional[Diagnostics] = None,
) -> list[LicenseText]:
    """Find the candidate texts of one license in a package.

    Args:
        package: Package whose ``source_dir`` is searched.
        license: A single (non-multiple) license of the package.
        diagnostics: Collector for files that could not be read.

    Returns:
        Candidate texts with their confidence, in file name order. Empty
        for an unspecified license or when nothing matches.

    Raises:
        ValueError: If ``license`` is a multiple license.
        DiscoveryError: If the source directory cannot be listed.
    """
    if license.is_multiple:
        raise ValueError("Search each member of a multiple license separately")

    if license.kind == LicenseKind.UNSPECIFIED:
        return []

    if license.kind == LicenseKind.FILE:
        return _find_license_file(package, license, diagnostics)

    try:
        entries = sorted(package.source_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryError(
            f"Cannot list license directory '{package.source_dir}' "
            f"of {package.name}:{package.version}: {e}"
        ) from e

    texts: list[LicenseText] = []
    generic: Optional[LicenseText] = None
    for path in entries:
        if not path.is_file():
            continue
        if name_matches(path.name, license):
            text = _read_text(path, package, diagnostics)
            if text is not None:
                texts.append(
                    LicenseText(
                        path=path,
                        text=text,
                        confidence=check_against_template(text, license),
                    )
                )
        elif generic is None and is_generic_license_name(path.name):
            text = _read_text(path, package, diagnostics)
            if text is not None:
                generic = LicenseText(
                    path=path,
                    text=text,
                    confidence=check_against_template(text, license),
                )

    if not texts and generic is not None:
        texts.append(generic)
    return texts


def _find_license_file(
    package: Package, license: License, diagnostics: Optional[Diagnostics]
) -> list[LicenseText]:
    """Read the file a file license points to."""
    path = package.license_file
    if path is None and license.path:
        path = Path(license.path)
    if path is None:
        return []
    if not path.is_absolute():
        path = package.source_dir / path
    if not path.is_file():
        return []
    text = _read_text(path, package, diagnostics)
    if text is None:
        return []
    return [LicenseText(path=path, text=text, confidence=Confidence.NO_TEMPLATE)]


def _read_text(
    path: Path, package: Package, diagnostics: Optional[Diagnostics]
) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        if diagnostics is not None:
            diagnostics.info(
                DiagnosticCode.UNREADABLE_FILE,
                f"Skipping unreadable file {path}: {e}",
                package_name=package.name,
                package_version=package.version,
            )
        return None
