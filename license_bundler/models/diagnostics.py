"""Diagnostics collected while bundling licenses.

Discovery, scoring, back-fill and the subset check report recoverable
problems here instead of printing them, so callers decide how to render
them and tests can assert on the exact list.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, Field


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Machine readable kind of a diagnostic."""

    UNSPECIFIED_LICENSE = "unspecified_license"
    SEMI_CONFIDENT = "semi_confident"
    UNSURE = "unsure"
    NO_TEMPLATE = "no_template"
    MULTIPLE_CANDIDATES = "multiple_candidates"
    LICENSE_NOT_FOUND = "license_not_found"
    PREVIOUS_TEXT_USED = "previous_text_used"
    UNREADABLE_FILE = "unreadable_file"
    ROOT_MISMATCH = "root_mismatch"
    PACKAGE_MISSING = "package_missing"
    PACKAGE_MISMATCH = "package_mismatch"


class Diagnostic(BaseModel):
    """A single recoverable problem found while bundling."""

    model_config = {"extra": "forbid", "frozen": True}

    level: DiagnosticLevel = Field(description="Severity")
    code: DiagnosticCode = Field(description="Kind of problem")
    message: str = Field(description="Human-readable description")
    package_name: Optional[str] = Field(default=None, description="Package concerned")
    package_version: Optional[str] = Field(
        default=None, description="Version of the package concerned"
    )
    license: Optional[str] = Field(default=None, description="License concerned")

    def __str__(self) -> str:
        return f"[{self.level.value}] {self.message}"


class Diagnostics:
    """Ordered collector of diagnostics."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def _record(
        self,
        level: DiagnosticLevel,
        code: DiagnosticCode,
        message: str,
        package_name: Optional[str] = None,
        package_version: Optional[str] = None,
        license: Optional[str] = None,
    ) -> None:
        self.add(
            Diagnostic(
                level=level,
                code=code,
                message=message,
                package_name=package_name,
                package_version=package_version,
                license=license,
            )
        )

    def info(
        self,
        code: DiagnosticCode,
        message: str,
        package_name: Optional[str] = None,
        package_version: Optional[str] = None,
        license: Optional[str] = None,
    ) -> None:
        self._record(
            DiagnosticLevel.INFO, code, message, package_name, package_version, license
        )

    def warning(
        self,
        code: DiagnosticCode,
        message: str,
        package_name: Optional[str] = None,
        package_version: Optional[str] = None,
        license: Optional[str] = None,
    ) -> None:
        self._record(
            DiagnosticLevel.WARNING,
            code,
            message,
            package_name,
            package_version,
            license,
        )

    def error(
        self,
        code: DiagnosticCode,
        message: str,
        package_name: Optional[str] = None,
        package_version: Optional[str] = None,
        license: Optional[str] = None,
    ) -> None:
        self._record(
            DiagnosticLevel.ERROR, code, message, package_name, package_version, license
        )

    def extend(self, other: Diagnostics) -> None:
        self._items.extend(other.items)

    @property
    def items(self) -> list[Diagnostic]:
        """All diagnostics in the order they were recorded."""
        return list(self._items)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.level == DiagnosticLevel.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.level == DiagnosticLevel.ERROR]

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        """Get all diagnostics of one kind.

        Args:
            code: The diagnostic code to filter by.

        Returns:
            Matching diagnostics in recording order.
        """
        return [d for d in self._items if d.code == code]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))
