"""Configuration Pydantic models for license-bundler."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class BundlerConfig(BaseModel):
    """Configuration for license-bundler.

    All fields are optional with None defaults to allow partial
    configuration. Command line flags take precedence over these values.
    """

    model_config = {"extra": "forbid"}

    format: Optional[Literal["json", "toml", "yaml"]] = Field(
        default=None,
        description="Output format of the bundle.",
    )
    output: Optional[str] = Field(
        default=None,
        description="Path the bundle is written to. Defaults to stdout.",
    )
    previous: Optional[str] = Field(
        default=None,
        description="Path of a previous bundle used to back-fill missing texts.",
    )
    check_previous: Optional[bool] = Field(
        default=None,
        description="Fail if the previous bundle is not a subset of the new one.",
    )
    features: Optional[List[str]] = Field(
        default=None,
        description="Optional dependency groups (extras) of the root packages "
        "to include.",
    )
    prefer: Optional[List[str]] = Field(
        default=None,
        description="Preferred licenses, in order, for packages offering a "
        "choice of licenses.",
    )
    ignored_packages: Optional[List[str]] = Field(
        default=None,
        description="List of package names left out of the bundle.",
    )
