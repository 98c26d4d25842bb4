"""License model for license-bundler.

A License is an immutable tagged value: one of a closed set of well-known
SPDX licenses, a custom free-text identifier, a reference to a license file,
a list of alternatives ("choose one"), or unspecified.

A license combined with an exception (``Apache-2.0 WITH LLVM-exception``)
is treated as its own atomic license.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from importlib.resources import files
from typing import Iterable, Optional

from pydantic import BaseModel, Field


class KnownLicense(str, Enum):
    """Licenses from the SPDX License List with first-class support."""

    UNLICENSE = "Unlicense"
    BSD_0_CLAUSE = "0BSD"
    CC0_1_0 = "CC0-1.0"
    MIT = "MIT"
    X11 = "X11"
    ISC = "ISC"
    PSF_2_0 = "PSF-2.0"
    BSD_2_CLAUSE = "BSD-2-Clause"
    BSD_3_CLAUSE = "BSD-3-Clause"
    BSL_1_0 = "BSL-1.0"
    APACHE_2_0 = "Apache-2.0"
    APACHE_2_0_WITH_LLVM_EXCEPTION = "Apache-2.0 WITH LLVM-exception"
    LGPL_2_0 = "LGPL-2.0-only"
    LGPL_2_1 = "LGPL-2.1-only"
    LGPL_2_1_PLUS = "LGPL-2.1-or-later"
    LGPL_3_0 = "LGPL-3.0-only"
    LGPL_3_0_PLUS = "LGPL-3.0-or-later"
    MPL_1_1 = "MPL-1.1"
    MPL_2_0 = "MPL-2.0"
    GPL_2_0 = "GPL-2.0-only"
    GPL_2_0_PLUS = "GPL-2.0-or-later"
    GPL_3_0 = "GPL-3.0-only"
    GPL_3_0_PLUS = "GPL-3.0-or-later"
    AGPL_3_0 = "AGPL-3.0-only"
    AGPL_3_0_PLUS = "AGPL-3.0-or-later"
    ZLIB = "Zlib"


class LicenseKind(str, Enum):
    """Variant tag of a License."""

    KNOWN = "known"
    CUSTOM = "custom"
    FILE = "file"
    MULTIPLE = "multiple"
    UNSPECIFIED = "unspecified"


# Template file (under license_bundler/templates) for each known license.
# The "-only" and "-or-later" variants share the same license body.
TEMPLATE_FILES: dict[KnownLicense, str] = {
    KnownLicense.UNLICENSE: "Unlicense.txt",
    KnownLicense.BSD_0_CLAUSE: "0BSD.txt",
    KnownLicense.CC0_1_0: "CC0-1.0.txt",
    KnownLicense.MIT: "MIT.txt",
    KnownLicense.ISC: "ISC.txt",
    KnownLicense.BSD_2_CLAUSE: "BSD-2-Clause.txt",
    KnownLicense.BSD_3_CLAUSE: "BSD-3-Clause.txt",
    KnownLicense.BSL_1_0: "BSL-1.0.txt",
    KnownLicense.APACHE_2_0: "Apache-2.0.txt",
    KnownLicense.APACHE_2_0_WITH_LLVM_EXCEPTION: "Apache-2.0_WITH_LLVM-exception.txt",
    KnownLicense.LGPL_2_0: "LGPL-2.0.txt",
    KnownLicense.LGPL_2_1: "LGPL-2.1.txt",
    KnownLicense.LGPL_2_1_PLUS: "LGPL-2.1.txt",
    KnownLicense.LGPL_3_0: "LGPL-3.0.txt",
    KnownLicense.LGPL_3_0_PLUS: "LGPL-3.0.txt",
    KnownLicense.MPL_1_1: "MPL-1.1.txt",
    KnownLicense.MPL_2_0: "MPL-2.0.txt",
    KnownLicense.GPL_2_0: "GPL-2.0.txt",
    KnownLicense.GPL_2_0_PLUS: "GPL-2.0.txt",
    KnownLicense.GPL_3_0: "GPL-3.0.txt",
    KnownLicense.GPL_3_0_PLUS: "GPL-3.0.txt",
    KnownLicense.ZLIB: "Zlib.txt",
}

# Extra file-name synonyms beyond the slugified SPDX identifier
EXTRA_SYNONYMS: dict[KnownLicense, list[str]] = {
    KnownLicense.APACHE_2_0: ["apache", "apache2", "apache-2"],
    KnownLicense.BSL_1_0: ["boost"],
}

_KIND_ORDER: dict[LicenseKind, int] = {
    LicenseKind.KNOWN: 0,
    LicenseKind.CUSTOM: 1,
    LicenseKind.FILE: 2,
    LicenseKind.MULTIPLE: 3,
    LicenseKind.UNSPECIFIED: 4,
}

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Slugify a string for file name matching.

    Args:
        value: Any string, e.g. "LICENSE-APACHE.txt" or "Apache-2.0".

    Returns:
        Lowercase string with runs of non-alphanumerics collapsed to a
        single "-" and no leading/trailing "-" (e.g. "license-apache-txt").
    """
    return _SLUG_SEPARATORS.sub("-", value.lower()).strip("-")


@lru_cache(maxsize=None)
def load_template(file_name: str) -> str:
    """Read an embedded license template from package data."""
    return (files("license_bundler") / "templates" / file_name).read_text(
        encoding="utf-8"
    )


class License(BaseModel):
    """An immutable license value.

    Use the constructors (``of``, ``custom``, ``file``, ``alternatives``,
    ``unspecified``) rather than setting fields directly.
    """

    model_config = {"extra": "forbid", "frozen": True}

    kind: LicenseKind = Field(
        default=LicenseKind.UNSPECIFIED, description="Variant of the license"
    )
    known: Optional[KnownLicense] = Field(
        default=None, description="SPDX license for kind=known"
    )
    text: Optional[str] = Field(
        default=None, description="Free-text identifier for kind=custom"
    )
    path: Optional[str] = Field(
        default=None, description="License file path for kind=file"
    )
    members: tuple[License, ...] = Field(
        default=(), description="Alternatives for kind=multiple"
    )

    @classmethod
    def of(cls, known: KnownLicense) -> License:
        return cls(kind=LicenseKind.KNOWN, known=known)

    @classmethod
    def custom(cls, text: str) -> License:
        return cls(kind=LicenseKind.CUSTOM, text=text)

    @classmethod
    def file(cls, path: str) -> License:
        return cls(kind=LicenseKind.FILE, path=str(path))

    @classmethod
    def unspecified(cls) -> License:
        return cls(kind=LicenseKind.UNSPECIFIED)

    @classmethod
    def alternatives(cls, licenses: Iterable[License]) -> License:
        """Build a "choose one of" license.

        Nested alternatives are flattened and duplicates removed while
        keeping first-seen order. A single surviving license is returned
        as-is.

        Args:
            licenses: The alternative licenses.

        Returns:
            A multiple license, or the only distinct license given.

        Raises:
            ValueError: If no licenses are given.
        """
        flattened: list[License] = []
        seen: set[License] = set()
        for lic in licenses:
            candidates = lic.members if lic.kind == LicenseKind.MULTIPLE else (lic,)
            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    flattened.append(candidate)

        if not flattened:
            raise ValueError("At least one license is required")
        if len(flattened) == 1:
            return flattened[0]
        return cls(kind=LicenseKind.MULTIPLE, members=tuple(flattened))

    @property
    def is_multiple(self) -> bool:
        return self.kind == LicenseKind.MULTIPLE

    @property
    def template(self) -> Optional[str]:
        """Reference license text used for confidence scoring.

        Returns:
            The template text, or None if this license has no template.

        Raises:
            ValueError: For multiple licenses; expand the members instead.
        """
        if self.kind == LicenseKind.MULTIPLE:
            raise ValueError(
                "Multiple licenses have no single template, use each member's"
            )
        if self.kind != LicenseKind.KNOWN or self.known not in TEMPLATE_FILES:
            return None
        return load_template(TEMPLATE_FILES[self.known])

    def synonyms(self) -> list[str]:
        """Slugified names for file name matching, longest first.

        The longest synonym is tried first on the assumption that it is the
        most specific.
        """
        names = [slugify(str(self))]
        if self.kind == LicenseKind.KNOWN and self.known is not None:
            names.extend(EXTRA_SYNONYMS.get(self.known, []))
        return sorted(names, key=len, reverse=True)

    def sort_key(self) -> tuple[int, str]:
        """Total order key: variant first, then canonical string."""
        return (_KIND_ORDER[self.kind], str(self))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, License):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        if self.kind == LicenseKind.KNOWN and self.known is not None:
            return self.known.value
        if self.kind == LicenseKind.CUSTOM:
            return self.text or ""
        if self.kind == LicenseKind.FILE:
            return f"License specified in file ({self.path})"
        if self.kind == LicenseKind.MULTIPLE:
            return " / ".join(str(member) for member in self.members)
        return "No license specified"


License.model_rebuild()
