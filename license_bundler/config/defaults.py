"""Default configuration values for license-bundler."""

from __future__ import annotations

from license_bundler.models.config import BundlerConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".license-bundler.yaml", ".license-bundler.yml"]

# pyproject.toml table read when no configuration file exists
PYPROJECT_NAME = "pyproject.toml"
PYPROJECT_TABLE = "license-bundler"

# Format used when neither a flag, the config nor a file extension decides
DEFAULT_FORMAT = "json"


def get_default_config() -> BundlerConfig:
    """Get the default configuration.

    Returns:
        BundlerConfig with all defaults (all fields None).
    """
    return BundlerConfig()
