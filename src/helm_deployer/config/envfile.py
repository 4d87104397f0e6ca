"""Loading of .env files into a deployment environment.

This module reads line-oriented ``KEY=VALUE`` files with python-dotenv,
overlays them on the process environment, and checks that required
variables are present.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from dotenv import dotenv_values

from helm_deployer.exceptions import EnvFileError, MissingVariablesError

logger = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"


def load_env_file(path: str | Path) -> dict[str, str]:
    """Parse a .env file into a dictionary.

    Comment lines (``#``) and blank lines are skipped, quoted values are
    unquoted and ``export KEY=VALUE`` is accepted. Values are taken
    verbatim: ``${VAR}`` inside the file is not expanded. Keys declared
    without a value are dropped.

    Args:
        path: Path to the .env file.

    Returns:
        Mapping of variable names to values, in file order.

    Raises:
        EnvFileError: If the file does not exist, is not a file, or cannot
            be read.
    """
    path = Path(path)

    if not path.exists():
        raise EnvFileError(
            f".env file not found: {path}",
            suggestion="Create a .env file next to the chart with NOTION_API_KEY, "
            "GEMINI_API_KEY and SERPER_API_KEY, or pass --env-file.",
        )

    if not path.is_file():
        raise EnvFileError(
            f"Path is not a file: {path}",
            suggestion="Provide a path to a .env file, not a directory.",
        )

    try:
        raw = dotenv_values(path, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileError(
            f"Failed to read .env file '{path}': {e}",
            suggestion="Check file permissions and ensure the file is UTF-8 text.",
        ) from e

    values = {key: value for key, value in raw.items() if value is not None}
    logger.debug("Loaded %d variable(s) from %s", len(values), path)
    return values


def build_environment(
    file_values: Mapping[str, str],
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Overlay .env values on a base environment.

    Values from the file take precedence over the base environment, the
    same way exporting them into the shell would.

    Args:
        file_values: Variables loaded from the .env file.
        base: Base environment. Defaults to ``os.environ``.

    Returns:
        A new merged environment dictionary.
    """
    env = dict(os.environ if base is None else base)
    overridden = [key for key in file_values if key in env]
    if overridden:
        logger.debug("Overriding from .env: %s", ", ".join(overridden))
    env.update(file_values)
    return env


def check_required(env: Mapping[str, str], names: Iterable[str]) -> None:
    """Ensure every required variable is set and non-empty.

    Args:
        env: The environment to check.
        names: Required variable names.

    Raises:
        MissingVariablesError: Listing every missing name in declared order.
    """
    missing = [name for name in names if not env.get(name)]
    if missing:
        raise MissingVariablesError(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
            suggestion="Add them to your .env file, e.g. "
            + " ".join(f"{name}=..." for name in missing),
        )
