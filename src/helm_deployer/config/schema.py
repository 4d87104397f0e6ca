"""Pydantic models for deploy profiles.

This module defines the models describing which release to deploy, which
environment variables are required, and how they map onto Helm values.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from helm_deployer.exceptions import InvalidModeError

_ENV_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_REQUIRED = ["NOTION_API_KEY", "GEMINI_API_KEY", "SERPER_API_KEY"]

DEFAULT_VALUES = {
    "env.notionApiKey": "${NOTION_API_KEY}",
    "env.geminiApiKey": "${GEMINI_API_KEY}",
    "env.serperApiKey": "${SERPER_API_KEY}",
    "env.notionParentPageId": "${NOTION_PARENT_PAGE_ID:-}",
    "env.notionParentPageUrl": "${NOTION_PARENT_PAGE_URL:-}",
}


class DeployMode(str, Enum):
    """Helm operation to perform."""

    INSTALL = "install"
    UPGRADE = "upgrade"

    @classmethod
    def parse(cls, value: str | DeployMode) -> DeployMode:
        """Convert a string to a DeployMode.

        Raises:
            InvalidModeError: If the value is not a known mode.
        """
        if isinstance(value, DeployMode):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidModeError(value) from None


class DeployProfile(BaseModel):
    """Describes a Helm release and the values passed to it."""

    release_name: str = "research-team"
    """Helm release name."""

    chart: str = "."
    """Chart reference, relative to the chart directory."""

    namespace: str | None = None
    """Kubernetes namespace passed as --namespace when set."""

    helm_binary: str = "helm"
    """Executable used to run helm."""

    default_image_tag: str = "v1.0"
    """Image tag used for upgrades when none is given."""

    image_tag_key: str = "image.tag"
    """Helm value key receiving the image tag on upgrade."""

    required: list[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED))
    """Environment variables that must be set and non-empty."""

    values: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VALUES))
    """Helm value keys mapped to ${VAR} templates."""

    @field_validator("release_name", "chart", "helm_binary", "image_tag_key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("required")
    @classmethod
    def validate_required_names(cls, v: list[str]) -> list[str]:
        """Ensure required names are valid and unique."""
        seen: set[str] = set()
        for name in v:
            if not _ENV_NAME_PATTERN.match(name):
                raise ValueError(f"'{name}' is not a valid environment variable name")
            if name in seen:
                raise ValueError(f"duplicate required variable '{name}'")
            seen.add(name)
        return v

    @field_validator("values")
    @classmethod
    def validate_value_keys(cls, v: dict[str, str]) -> dict[str, str]:
        for key in v:
            if not key.strip():
                raise ValueError("helm value keys must not be empty")
        return v
