"""Deploy profile loader with environment variable resolution.

This module handles loading YAML deploy profiles, parsing them into
typed Pydantic models, and resolving ${VAR} references in Helm values
against the deployment environment.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from helm_deployer.config.schema import DeployProfile
from helm_deployer.exceptions import ConfigurationError

# Pattern to match ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def resolve_env_vars(value: str, env: Mapping[str, str]) -> str:
    """Resolve ${VAR} and ${VAR:-default} patterns in a string.

    Substituted values are inserted verbatim and never re-scanned, so a
    secret containing ``$`` or ``${...}`` is passed through unchanged.

    The default applies only when the variable is unset. Unlike the shell's
    ``:-``, a variable set to an empty string resolves to the empty string.

    Args:
        value: The string potentially containing env var references.
        env: The environment to resolve against.

    Returns:
        The string with all references resolved.

    Raises:
        ConfigurationError: If a referenced variable is unset and no
            default is provided.
    """

    def replace_env_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = env.get(var_name)

        if env_value is not None:
            return env_value
        elif default_value is not None:
            return default_value
        else:
            raise ConfigurationError(
                f"Environment variable '{var_name}' is not set",
                suggestion=f"Set '{var_name}' in your .env file or provide a default "
                f"using the syntax: ${{{var_name}:-default_value}}",
            )

    return ENV_VAR_PATTERN.sub(replace_env_var, value)


def resolve_values(profile: DeployProfile, env: Mapping[str, str]) -> dict[str, str]:
    """Resolve every Helm value of a profile, preserving order.

    Args:
        profile: The deploy profile.
        env: The environment to resolve against.

    Returns:
        Helm value keys mapped to their resolved strings.
    """
    return {key: resolve_env_vars(template, env) for key, template in profile.values.items()}


class ProfileLoader:
    """Loads and validates deploy profiles from YAML files.

    This class handles:
    - YAML parsing with line number tracking for error messages
    - Pydantic schema validation
    """

    def __init__(self) -> None:
        """Initialize the loader with a ruamel.yaml safe parser."""
        self._yaml = YAML(typ="safe")

    def load(self, path: str | Path) -> DeployProfile:
        """Load a deploy profile from a YAML file.

        Raises:
            ConfigurationError: If the file cannot be read, contains invalid
                YAML syntax, or fails schema validation.
        """
        path = Path(path)

        if not path.is_file():
            raise ConfigurationError(
                f"Deploy profile not found: {path}",
                suggestion="Check that the --profile path is correct and the file exists.",
            )

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read deploy profile '{path}': {e}",
                suggestion="Check file permissions and ensure the file is readable.",
            ) from e

        return self.load_string(content, source_path=path)

    def load_string(self, content: str, source_path: Path | None = None) -> DeployProfile:
        """Load a deploy profile from a YAML string.

        Args:
            content: The YAML content as a string.
            source_path: Optional path for error messages.

        Raises:
            ConfigurationError: If the YAML is invalid or fails validation.
        """
        source = str(source_path) if source_path else "<string>"

        try:
            data = self._yaml.load(content)
        except YAMLError as e:
            line_info = ""
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                line_info = f" at line {mark.line + 1}, column {mark.column + 1}"

            raise ConfigurationError(
                f"Invalid YAML syntax in '{source}'{line_info}: {e}",
                suggestion="Check the YAML syntax. Common issues include incorrect "
                "indentation, missing colons, or unquoted special characters.",
            ) from e

        if data is None:
            raise ConfigurationError(
                f"Empty deploy profile: {source}",
                suggestion="Add at least one setting, or omit --profile to use the defaults.",
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid deploy profile format in '{source}': "
                f"expected a mapping, got {type(data).__name__}",
                suggestion="Ensure the YAML file contains a mapping of profile settings.",
            )

        return self._validate(data, source)

    def _validate(self, data: dict[str, Any], source: str) -> DeployProfile:
        try:
            return DeployProfile.model_validate(data)
        except PydanticValidationError as e:
            formatted_errors = []
            for err in e.errors():
                loc = ".".join(str(x) for x in err.get("loc", ()))
                formatted_errors.append(f"  - {loc}: {err.get('msg', 'Unknown error')}")

            raise ConfigurationError(
                f"Deploy profile validation failed in '{source}':\n"
                + "\n".join(formatted_errors),
                suggestion="Check the profile fields. Helm values must be strings; "
                "quote numbers and booleans.",
            ) from e


def load_profile(path: str | Path | None = None) -> DeployProfile:
    """Load a deploy profile, or return the built-in default.

    Args:
        path: Path to a YAML deploy profile, or None for the defaults.

    Raises:
        ConfigurationError: If loading or validation fails.
    """
    if path is None:
        return DeployProfile()
    return ProfileLoader().load(path)


def load_profile_string(content: str, source_path: Path | None = None) -> DeployProfile:
    """Convenience function to load a deploy profile from a string."""
    return ProfileLoader().load_string(content, source_path)
