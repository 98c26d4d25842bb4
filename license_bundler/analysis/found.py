"""Per-package license search results."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from license_bundler.analysis.confidence import Confidence
from license_bundler.analysis.discovery import find_package_license
from license_bundler.analysis.selection import BestChoice, ChoiceKind, choose
from license_bundler.constants import LICENSE_NOT_FOUND_TEXT
from license_bundler.models.diagnostics import DiagnosticCode, Diagnostics
from license_bundler.models.finalized import FinalizedLicense, LicenseAndText
from license_bundler.models.license import License, LicenseKind
from license_bundler.models.package import Package

# Warning message for each confidence of a single choice
_CONFIDENCE_WARNINGS: dict[Confidence, tuple[DiagnosticCode, str]] = {
    Confidence.SEMI_CONFIDENT: (DiagnosticCode.SEMI_CONFIDENT, "Confidence level SEMI"),
    Confidence.UNSURE: (DiagnosticCode.UNSURE, "Confidence level UNSURE"),
    Confidence.NO_TEMPLATE: (DiagnosticCode.NO_TEMPLATE, "No template"),
}


class FoundText(BaseModel):
    """Selection result for one license of a package."""

    model_config = {"extra": "forbid"}

    license: License = Field(description="The (sub-)license searched for")
    best_choice: BestChoice = Field(description="Selected candidate(s)")
    confidence: Confidence = Field(description="Confidence of the selection")


class FoundLicense(BaseModel):
    """Found license texts of a package, one per sub-license."""

    model_config = {"extra": "forbid"}

    package: Package = Field(description="Package the licenses belong to")
    license: License = Field(description="License resolved for the package")
    texts: list[FoundText] = Field(
        default_factory=list, description="One entry per sub-license"
    )

    @classmethod
    def from_package(
        cls, package: Package, diagnostics: Optional[Diagnostics] = None
    ) -> FoundLicense:
        """Search a package for its license texts and pick the best candidates.

        Args:
            package: Package to search.
            diagnostics: Collector for unreadable candidate files.

        Returns:
            FoundLicense with one FoundText per sub-license.

        Raises:
            DiscoveryError: If the package's license directory cannot be listed.
        """
        license = package.resolved_license()
        if license.kind == LicenseKind.UNSPECIFIED:
            texts = [
                FoundText(
                    license=license,
                    best_choice=BestChoice(
                        kind=ChoiceKind.NONE,
                        confidence=Confidence.UNSPECIFIED_LICENSE_IN_PACKAGE,
                    ),
                    confidence=Confidence.UNSPECIFIED_LICENSE_IN_PACKAGE,
                )
            ]
        else:
            members = license.members if license.is_multiple else (license,)
            texts = []
            for member in members:
                choice = choose(find_package_license(package, member, diagnostics))
                texts.append(
                    FoundText(
                        license=member, best_choice=choice, confidence=choice.confidence
                    )
                )
        return cls(package=package, license=license, texts=texts)

    def check(self, diagnostics: Diagnostics) -> None:
        """Record a warning for every text that is missing or doubtful.

        Args:
            diagnostics: Collector receiving the warnings.
        """
        package = self.package
        where = f"{package.name}:{package.version} - {package.source_dir}"
        for found in self.texts:
            license = str(found.license)
            if found.license.kind == LicenseKind.UNSPECIFIED:
                diagnostics.warning(
                    DiagnosticCode.UNSPECIFIED_LICENSE,
                    f"License is not specified for {where}",
                    package_name=package.name,
                    package_version=package.version,
                )
                continue

            kind = found.best_choice.kind
            if kind == ChoiceKind.SINGLE:
                warning = _CONFIDENCE_WARNINGS.get(found.confidence)
                if warning is None:
                    continue
                code, prefix = warning
                message = f"{prefix} for {license} license in {where}"
            elif kind == ChoiceKind.MULTIPLE:
                code = DiagnosticCode.MULTIPLE_CANDIDATES
                paths = ", ".join(text.path.name for text in found.best_choice.texts)
                message = (
                    f"Multiple possible licenses found for {license} license "
                    f"in {where} ({paths})"
                )
            else:
                code = DiagnosticCode.LICENSE_NOT_FOUND
                message = f"No license found for {license} license in {where}"

            diagnostics.warning(
                code,
                message,
                package_name=package.name,
                package_version=package.version,
                license=license,
            )

    def finalize(self) -> FinalizedLicense:
        """Pick one text per sub-license.

        An ambiguous choice takes the first candidate; a missing text is
        filled with the NOT FOUND placeholder.

        Returns:
            FinalizedLicense for the package.
        """
        licenses = []
        for found in self.texts:
            chosen = found.best_choice.text
            text = chosen.text if chosen is not None else LICENSE_NOT_FOUND_TEXT
            licenses.append(LicenseAndText.new(found.license, text))
        return FinalizedLicense.new(self.package, self.license, licenses)
