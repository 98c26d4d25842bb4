"""Configuration handling for license-bundler."""
from __future__ import annotations

from license_bundler.config.defaults import (
    DEFAULT_CONFIG_NAMES,
    DEFAULT_FORMAT,
    get_default_config,
)
from license_bundler.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
    load_pyproject_config,
)
from license_bundler.models.config import BundlerConfig

__all__ = [
    "BundlerConfig",
    "DEFAULT_CONFIG_NAMES",
    "DEFAULT_FORMAT",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
    "load_pyproject_config",
]
