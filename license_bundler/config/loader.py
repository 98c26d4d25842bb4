"""Configuration discovery and loading for license-bundler.

Settings come from a dedicated YAML file or from the
``[tool.license-bundler]`` table of the project's pyproject.toml. Relative
``output`` and ``previous`` paths are resolved against the directory of the
file that declared them, so a project can be bundled from anywhere.
"""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from license_bundler.config.defaults import (
    DEFAULT_CONFIG_NAMES,
    PYPROJECT_NAME,
    PYPROJECT_TABLE,
    get_default_config,
)
from license_bundler.exceptions import ConfigurationError
from license_bundler.models.config import BundlerConfig


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find the YAML configuration file of a project.

    Searches for `.license-bundler.yaml` first, then `.license-bundler.yml`.

    Args:
        start_dir: Directory to search. Defaults to current working directory.

    Returns:
        Path to the configuration file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        config_path = search_dir / name
        if config_path.is_file():
            return config_path
    return None


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e


def load_config_file(path: Path) -> BundlerConfig:
    """Load and validate configuration from a YAML file.

    A path named ``pyproject.toml`` is read with `load_pyproject_config`.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated BundlerConfig with paths relative to the file's directory.

    Raises:
        ConfigurationError: If file cannot be read, has invalid YAML,
            or fails Pydantic validation.
    """
    if path.name == PYPROJECT_NAME:
        return load_pyproject_config(path) or get_default_config()

    content = _read(path)
    if not content.strip():
        return get_default_config()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    # Only comments
    if data is None:
        return get_default_config()
    return _validate(data, path)


def load_pyproject_config(path: Path) -> BundlerConfig | None:
    """Load the ``[tool.license-bundler]`` table of a pyproject.toml.

    Args:
        path: Path to pyproject.toml.

    Returns:
        Validated BundlerConfig, or None if the file has no such table.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid TOML,
            or the table fails Pydantic validation.
    """
    try:
        data = tomllib.loads(_read(path))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML syntax in '{path}': {e}") from e

    table = data.get("tool", {}).get(PYPROJECT_TABLE)
    if table is None:
        return None
    if isinstance(table, dict):
        # TOML keys are conventionally kebab-case
        table = {key.replace("-", "_"): value for key, value in table.items()}
    return _validate(table, path)


def _validate(data: Any, path: Path) -> BundlerConfig:
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        config = BundlerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_format_validation_errors(e)}"
        ) from e
    return _resolve_paths(config, path.parent)


def _resolve_paths(config: BundlerConfig, base_dir: Path) -> BundlerConfig:
    updates = {
        field: str(base_dir / value)
        for field, value in (("output", config.output), ("previous", config.previous))
        if value is not None and not Path(value).is_absolute()
    }
    return config.model_copy(update=updates) if updates else config


def _format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors into a readable string."""
    messages: list[str] = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"]) if err["loc"] else "root"
        messages.append(f"{loc}: {err['msg']}")
    return "; ".join(messages)


def load_config(
    config_path: str | None = None, start_dir: Path | None = None
) -> BundlerConfig:
    """Load configuration from file or use defaults.

    An explicit ``config_path`` always wins. Otherwise ``start_dir`` (the
    current directory by default) is searched for a YAML configuration
    file, then for a ``[tool.license-bundler]`` table in its
    pyproject.toml. If neither exists, returns default configuration.

    Args:
        config_path: Optional path to configuration file.
        start_dir: Directory searched when no path is given.

    Returns:
        BundlerConfig with loaded or default values.

    Raises:
        ConfigurationError: If the specified or discovered file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    search_dir = start_dir or Path.cwd()
    discovered = find_config_file(search_dir)
    if discovered is not None:
        return load_config_file(discovered)

    pyproject = search_dir / PYPROJECT_NAME
    if pyproject.is_file():
        config = load_pyproject_config(pyproject)
        if config is not None:
            return config

    return get_default_config()
