"""Package metadata providers."""

from license_bundler.resolvers.base import MetadataProvider
from license_bundler.resolvers.closure import get_root_dependencies
from license_bundler.resolvers.installed import InstalledMetadataProvider
from license_bundler.resolvers.static import StaticMetadataProvider

__all__ = [
    "InstalledMetadataProvider",
    "MetadataProvider",
    "StaticMetadataProvider",
    "get_root_dependencies",
]
