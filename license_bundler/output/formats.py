"""Bundle encodings: JSON, TOML and YAML.

All three round-trip exactly: ``fmt.deserialize(fmt.serialize(b)) == b``.
"""
from __future__ import annotations

import json
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TextIO

import tomli_w
import yaml
from pydantic import ValidationError

from license_bundler.exceptions import FormatError
from license_bundler.models.bundle import Bundle

# Alternative names accepted on the command line
FORMAT_ALIASES = {"tml": "toml", "yml": "yaml"}


class Format(str, Enum):
    """Output format of a bundle."""

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"

    @classmethod
    def parse(cls, name: str) -> Format:
        """Get a format by name, accepting the tml and yml aliases.

        Raises:
            FormatError: If the name is not a known format.
        """
        value = name.strip().lower()
        value = FORMAT_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise FormatError(f"Unknown format '{name}'") from None

    @classmethod
    def from_path(cls, path: Path) -> Optional[Format]:
        """Infer the format from a file extension, or None if unknown."""
        suffix = path.suffix.lstrip(".")
        if not suffix:
            return None
        try:
            return cls.parse(suffix)
        except FormatError:
            return None

    def serialize(self, bundle: Bundle) -> str:
        """Encode a bundle.

        Args:
            bundle: The bundle to encode.

        Returns:
            The encoded text.
        """
        data = bundle.model_dump(mode="json")
        if self is Format.JSON:
            return json.dumps(data, indent=2) + "\n"
        if self is Format.TOML:
            return tomli_w.dumps(data)
        return yaml.safe_dump(data, sort_keys=False)

    def deserialize(self, text: str) -> Bundle:
        """Decode a bundle.

        Args:
            text: Encoded bundle.

        Returns:
            The decoded Bundle.

        Raises:
            FormatError: If the text is malformed or not a bundle.
        """
        try:
            data = self._load(text)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            raise FormatError(f"Invalid {self.value.upper()} bundle: {e}") from e

        if not isinstance(data, dict):
            raise FormatError(
                f"Invalid {self.value.upper()} bundle: "
                f"expected a mapping at root level, got {type(data).__name__}"
            )
        try:
            return Bundle.model_validate(data)
        except ValidationError as e:
            raise FormatError(f"Invalid {self.value.upper()} bundle: {e}") from e

    def _load(self, text: str) -> Any:
        if self is Format.JSON:
            return json.loads(text)
        if self is Format.TOML:
            return tomllib.loads(text)
        return yaml.safe_load(text)

    def serialize_to_writer(self, bundle: Bundle, writer: TextIO) -> None:
        writer.write(self.serialize(bundle))

    def deserialize_from_reader(self, reader: TextIO) -> Bundle:
        return self.deserialize(reader.read())


def load_bundle(path: Path, format: Optional[Format] = None) -> Bundle:
    """Read a bundle file.

    Args:
        path: Bundle file.
        format: Encoding of the file; inferred from the extension, then
            JSON, when None.

    Returns:
        The decoded Bundle.

    Raises:
        FormatError: If the file cannot be read or decoded.
    """
    fmt = format or Format.from_path(path) or Format.JSON
    try:
        with path.open(encoding="utf-8") as f:
            return fmt.deserialize_from_reader(f)
    except OSError as e:
        raise FormatError(f"Cannot read bundle '{path}': {e}") from e
