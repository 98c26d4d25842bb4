"""License declaration parsing.

Turns the free-form license string a package declares into a License.
Uses the license-expression library for lenient SPDX parsing.

Note: AND and OR are both read as "one of these licenses applies". This is
a simplification, not a legal interpretation of SPDX conjunctions.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from license_expression import (
    ExpressionError,
    LicenseWithExceptionSymbol,
    get_spdx_licensing,
)

from license_bundler.models.license import KnownLicense, License, LicenseKind

_licensing = get_spdx_licensing()

# Exact identifiers accepted for each known license, including the
# deprecated short forms still common in package metadata
SPDX_IDENTIFIERS: dict[str, KnownLicense] = {
    "Unlicense": KnownLicense.UNLICENSE,
    "0BSD": KnownLicense.BSD_0_CLAUSE,
    "CC0-1.0": KnownLicense.CC0_1_0,
    "MIT": KnownLicense.MIT,
    "X11": KnownLicense.X11,
    "ISC": KnownLicense.ISC,
    "PSF-2.0": KnownLicense.PSF_2_0,
    "BSD-2-Clause": KnownLicense.BSD_2_CLAUSE,
    "BSD-3-Clause": KnownLicense.BSD_3_CLAUSE,
    "BSL-1.0": KnownLicense.BSL_1_0,
    "Apache-2.0": KnownLicense.APACHE_2_0,
    "Apache-2.0 WITH LLVM-exception": KnownLicense.APACHE_2_0_WITH_LLVM_EXCEPTION,
    "LGPL-2.0-only": KnownLicense.LGPL_2_0,
    "LGPL-2.0": KnownLicense.LGPL_2_0,
    "LGPL-2.1-only": KnownLicense.LGPL_2_1,
    "LGPL-2.1": KnownLicense.LGPL_2_1,
    "LGPL-2.1-or-later": KnownLicense.LGPL_2_1_PLUS,
    "LGPL-2.1+": KnownLicense.LGPL_2_1_PLUS,
    "LGPL-3.0-only": KnownLicense.LGPL_3_0,
    "LGPL-3.0": KnownLicense.LGPL_3_0,
    "LGPL-3.0-or-later": KnownLicense.LGPL_3_0_PLUS,
    "LGPL-3.0+": KnownLicense.LGPL_3_0_PLUS,
    "MPL-1.1": KnownLicense.MPL_1_1,
    "MPL-2.0": KnownLicense.MPL_2_0,
    "GPL-2.0-only": KnownLicense.GPL_2_0,
    "GPL-2.0": KnownLicense.GPL_2_0,
    "GPL-2.0-or-later": KnownLicense.GPL_2_0_PLUS,
    "GPL-2.0+": KnownLicense.GPL_2_0_PLUS,
    "GPL-3.0-only": KnownLicense.GPL_3_0,
    "GPL-3.0": KnownLicense.GPL_3_0,
    "GPL-3.0-or-later": KnownLicense.GPL_3_0_PLUS,
    "GPL-3.0+": KnownLicense.GPL_3_0_PLUS,
    "AGPL-3.0-only": KnownLicense.AGPL_3_0,
    "AGPL-3.0": KnownLicense.AGPL_3_0,
    "AGPL-3.0-or-later": KnownLicense.AGPL_3_0_PLUS,
    "AGPL-3.0+": KnownLicense.AGPL_3_0_PLUS,
    "Zlib": KnownLicense.ZLIB,
}

# Mapping of trove classifiers to SPDX identifiers, for packages that only
# declare their license through classifiers
CLASSIFIER_TO_SPDX: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: MIT No Attribution License (MIT-0)": "MIT-0",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": "GPL-3.0-only",
    "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)": (
        "GPL-3.0-or-later"
    ),
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": "GPL-2.0-only",
    "License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)": (
        "GPL-2.0-or-later"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0-only"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)": (
        "LGPL-3.0-or-later"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0-only"
    ),
    "License :: OSI Approved :: GNU Affero General Public License v3": "AGPL-3.0-only",
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: Mozilla Public License 1.1 (MPL 1.1)": "MPL-1.1",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: Boost Software License 1.0 (BSL-1.0)": "BSL-1.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
    "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication": "CC0-1.0",
}

_OR_SEPARATOR = re.compile(r"\s+OR\s+")


def parse_license(text: str) -> License:
    """Parse a license declaration into a License.

    Parsing never fails: anything that cannot be understood becomes a
    custom license holding the original text.

    Args:
        text: License declaration, e.g. "MIT OR Apache-2.0" or "MIT/Apache-2.0".

    Returns:
        The parsed License. Several distinct licenses yield a multiple
        license sorted by the License order.
    """
    # "/" is the legacy spelling of OR
    lenient = text.replace("/", " OR ")
    try:
        expression = _licensing.parse(lenient, validate=False)
    except (ExpressionError, IndexError, AssertionError, TypeError):
        # The parser fails on some malformed input with non-library errors
        return simple_license(text)

    if expression is None:
        return simple_license(text)

    leaves: list[License] = []
    for symbol in _licensing.license_symbols(expression, unique=False, decompose=False):
        leaf = simple_license(_symbol_text(symbol))
        if leaf not in leaves:
            leaves.append(leaf)

    if not leaves:
        return simple_license(text)
    if len(leaves) == 1:
        if leaves[0].kind == LicenseKind.CUSTOM:
            # Keep the declaration as written rather than the parser's rendering
            return simple_license(text)
        return leaves[0]
    return _sorted_alternatives(leaves)


def simple_license(text: str) -> License:
    """Match a declaration without SPDX expression parsing.

    Args:
        text: A single identifier, or alternatives separated by "/" or " OR ".

    Returns:
        The matching known license, a sorted multiple license for
        alternatives, or a custom license.
    """
    value = text.strip()
    known = SPDX_IDENTIFIERS.get(value)
    if known is not None:
        return License.of(known)

    if "/" in value or _OR_SEPARATOR.search(value):
        parts = [
            part.strip()
            for chunk in value.split("/")
            for part in _OR_SEPARATOR.split(chunk)
        ]
        parts = [part for part in parts if part]
        if parts:
            return _sorted_alternatives(parse_license(part) for part in parts)

    return License.custom(value)


def _sorted_alternatives(licenses: Iterable[License]) -> License:
    combined = License.alternatives(licenses)
    if not combined.is_multiple:
        return combined
    return License(kind=LicenseKind.MULTIPLE, members=tuple(sorted(combined.members)))


def _symbol_text(symbol: object) -> str:
    """Render one expression leaf as an SPDX identifier string."""
    if isinstance(symbol, LicenseWithExceptionSymbol):
        return f"{symbol.license_symbol.key} WITH {symbol.exception_symbol.key}"
    return str(getattr(symbol, "key", symbol))


def license_from_classifiers(classifiers: Iterable[str]) -> Optional[str]:
    """Get an SPDX identifier from trove classifiers.

    Args:
        classifiers: Trove classifiers declared by a package.

    Returns:
        SPDX identifier of the first license classifier recognized,
        or None if none is recognized.
    """
    for classifier in classifiers:
        spdx = CLASSIFIER_TO_SPDX.get(classifier.strip())
        if spdx is not None:
            return spdx
    return None
