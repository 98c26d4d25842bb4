"""Finalized license records, the serializable unit of a bundle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from license_bundler.constants import LICENSE_NOT_FOUND_TEXT

if TYPE_CHECKING:
    from license_bundler.models.license import License
    from license_bundler.models.package import Package


class LicenseAndText(BaseModel):
    """One license of a package and its text."""

    model_config = {"extra": "forbid"}

    license: str = Field(description="The license in SPDX format")
    text: str = Field(description="The license text, or NOT FOUND")

    @classmethod
    def new(cls, license: License, text: str) -> LicenseAndText:
        return cls(license=str(license), text=text)

    @property
    def is_missing(self) -> bool:
        return self.text == LICENSE_NOT_FOUND_TEXT


class LicenseKey(BaseModel):
    """Package name and version, used to look up a previous bundle."""

    model_config = {"extra": "forbid", "frozen": True}

    package_name: str
    package_version: str


class FinalizedLicense(BaseModel):
    """The licenses of one package, ready to be serialized.

    Two finalized licenses are equal when all fields match; the ``licenses``
    lists are compared regardless of order.
    """

    model_config = {"extra": "forbid"}

    package_name: str = Field(description="Name of the package")
    package_version: str = Field(description="Version of the package")
    repository: str = Field(default="", description="Source repository URL")
    license: str = Field(description="License declaration of the package")
    licenses: list[LicenseAndText] = Field(
        default_factory=list, description="Each license and its text"
    )

    @classmethod
    def new(
        cls, package: Package, license: License, licenses: list[LicenseAndText]
    ) -> FinalizedLicense:
        """Build from a package, falling back to the computed license string.

        Args:
            package: The package the licenses belong to.
            license: The license resolved for the package.
            licenses: One entry per sub-license.

        Returns:
            FinalizedLicense for the package.
        """
        declared = package.license.strip() if package.license else ""
        return cls(
            package_name=package.name,
            package_version=package.version,
            repository=package.repository or "",
            license=declared or str(license),
            licenses=licenses,
        )

    @property
    def key(self) -> LicenseKey:
        return LicenseKey(
            package_name=self.package_name, package_version=self.package_version
        )

    @property
    def has_missing_text(self) -> bool:
        return any(lic.is_missing for lic in self.licenses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FinalizedLicense):
            return NotImplemented
        return (
            self.package_name == other.package_name
            and self.package_version == other.package_version
            and self.repository == other.repository
            and self.license == other.license
            and _sorted_texts(self.licenses) == _sorted_texts(other.licenses)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        names = ", ".join(lic.license for lic in self.licenses)
        return f"{self.package_name}:{self.package_version} - {self.license} [{names}]"


def _sorted_texts(licenses: list[LicenseAndText]) -> list[tuple[str, str]]:
    return sorted((lic.license, lic.text) for lic in licenses)


def finalized_licenses_lookup(
    licenses: list[FinalizedLicense],
) -> dict[LicenseKey, dict[str, LicenseAndText]]:
    """Index finalized licenses by package and license name.

    Args:
        licenses: Finalized licenses, e.g. from a previous bundle.

    Returns:
        Mapping of package key to a mapping of license string to entry.
    """
    lookup: dict[LicenseKey, dict[str, LicenseAndText]] = {}
    for finalized in licenses:
        lookup[finalized.key] = {lic.license: lic for lic in finalized.licenses}
    return lookup
