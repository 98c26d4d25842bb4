"""Custom exceptions for license-bundler."""


class LicenseBundlerError(Exception):
    """Base exception for all license-bundler errors."""

    pass


class ConfigurationError(LicenseBundlerError):
    """Exception raised when configuration is invalid."""

    pass


class ResolutionError(LicenseBundlerError):
    """Exception raised when the project's dependency graph cannot be resolved."""

    pass


class PackageNotFoundError(ResolutionError):
    """Exception raised when a package id referenced by the graph is unknown."""

    def __init__(self, package_id: str) -> None:
        super().__init__(f"{package_id} package not found")
        self.package_id = package_id


class DiscoveryError(LicenseBundlerError):
    """Exception raised when a package's license directory cannot be listed."""

    pass


class FormatError(LicenseBundlerError):
    """Exception raised when a bundle cannot be serialized or deserialized."""

    pass
