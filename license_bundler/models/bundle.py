"""Bundle model and the subset check between two bundles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from license_bundler.models.diagnostics import DiagnosticCode, Diagnostics
from license_bundler.models.finalized import FinalizedLicense, LicenseKey

if TYPE_CHECKING:
    from license_bundler.models.package import Package


class SubsetMismatch(BaseModel):
    """One reason a previous bundle is not contained in a candidate bundle."""

    model_config = {"extra": "forbid"}

    code: DiagnosticCode = Field(
        description="root_mismatch, package_missing or package_mismatch"
    )
    message: str = Field(description="Human-readable description")
    package_name: Optional[str] = Field(default=None, description="Package concerned")
    package_version: Optional[str] = Field(
        default=None, description="Version of the package concerned"
    )


class SubsetCheckResult(BaseModel):
    """Outcome of comparing a candidate bundle against a previous one."""

    model_config = {"extra": "forbid"}

    mismatches: list[SubsetMismatch] = Field(
        default_factory=list, description="Every mismatch found"
    )

    @property
    def ok(self) -> bool:
        return not self.mismatches


class Bundle(BaseModel):
    """Third-party license attributions of a project.

    ``third_party_libraries`` is kept sorted by package name then version;
    equality compares the lists positionally.
    """

    model_config = {"extra": "forbid"}

    root_name: str = Field(description="Root package name(s), comma separated")
    third_party_libraries: list[FinalizedLicense] = Field(
        default_factory=list, description="One entry per dependency"
    )

    @classmethod
    def from_roots(
        cls, roots: list[Package], libraries: list[FinalizedLicense]
    ) -> Bundle:
        """Create a bundle named after all of its root packages.

        Args:
            roots: Root packages of the project.
            libraries: Finalized licenses of the dependencies.

        Returns:
            Bundle whose root name joins the root names with ", ".
        """
        return cls(
            root_name=", ".join(root.name for root in roots),
            third_party_libraries=libraries,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bundle):
            return NotImplemented
        if self.root_name != other.root_name:
            return False
        if len(self.third_party_libraries) != len(other.third_party_libraries):
            return False
        return all(
            mine == theirs
            for mine, theirs in zip(
                self.third_party_libraries, other.third_party_libraries
            )
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        lines = [f"root_name: {self.root_name}"]
        lines.extend(str(library) for library in self.third_party_libraries)
        return "\n".join(lines)

    def check_subset(
        self, other: Bundle, diagnostics: Optional[Diagnostics] = None
    ) -> SubsetCheckResult:
        """Check that every package of a previous bundle is unchanged here.

        ``self`` is the candidate and ``other`` the previous bundle. Extra
        packages in the candidate are allowed. Every mismatch is reported.

        Args:
            other: The previous bundle.
            diagnostics: Collector receiving one error per mismatch.

        Returns:
            SubsetCheckResult listing all mismatches.
        """
        result = SubsetCheckResult()

        if self.root_name != other.root_name:
            result.mismatches.append(
                SubsetMismatch(
                    code=DiagnosticCode.ROOT_MISMATCH,
                    message=(
                        f"Root name mismatch: previous '{other.root_name}', "
                        f"current '{self.root_name}'"
                    ),
                )
            )

        candidates: dict[LicenseKey, FinalizedLicense] = {
            library.key: library for library in self.third_party_libraries
        }
        for previous in other.third_party_libraries:
            current = candidates.get(previous.key)
            if current is None:
                result.mismatches.append(
                    SubsetMismatch(
                        code=DiagnosticCode.PACKAGE_MISSING,
                        message=(
                            f"{previous.package_name}:{previous.package_version} "
                            "is missing from the current bundle"
                        ),
                        package_name=previous.package_name,
                        package_version=previous.package_version,
                    )
                )
            elif current != previous:
                result.mismatches.append(
                    SubsetMismatch(
                        code=DiagnosticCode.PACKAGE_MISMATCH,
                        message=(
                            f"{previous.package_name}:{previous.package_version} "
                            f"differs: previous {previous}, current {current}"
                        ),
                        package_name=previous.package_name,
                        package_version=previous.package_version,
                    )
                )

        if diagnostics is not None:
            for mismatch in result.mismatches:
                diagnostics.error(
                    mismatch.code,
                    mismatch.message,
                    package_name=mismatch.package_name,
                    package_version=mismatch.package_version,
                )
        return result
