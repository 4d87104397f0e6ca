"""Configuration module for Helm Deployer.

This module handles .env loading, YAML deploy profiles, Pydantic schema
validation, and ${VAR} resolution.
"""

from helm_deployer.config.envfile import (
    ENV_FILE_NAME,
    build_environment,
    check_required,
    load_env_file,
)
from helm_deployer.config.loader import (
    ProfileLoader,
    load_profile,
    load_profile_string,
    resolve_env_vars,
    resolve_values,
)
from helm_deployer.config.schema import DeployMode, DeployProfile

__all__ = [
    # .env
    "ENV_FILE_NAME",
    "build_environment",
    "check_required",
    "load_env_file",
    # Loader
    "ProfileLoader",
    "load_profile",
    "load_profile_string",
    "resolve_env_vars",
    "resolve_values",
    # Schema models
    "DeployMode",
    "DeployProfile",
]
