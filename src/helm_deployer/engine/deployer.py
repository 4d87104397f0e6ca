"""Deployment orchestration for Helm Deployer.

This module ties together .env loading, variable checks, value
resolution, and helm execution.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from helm_deployer.config.envfile import (
    ENV_FILE_NAME,
    build_environment,
    check_required,
    load_env_file,
)
from helm_deployer.config.loader import load_profile, resolve_values
from helm_deployer.config.schema import DeployMode, DeployProfile
from helm_deployer.engine.command import HelmCommand, build_helm_command, run_helm_command

logger = logging.getLogger(__name__)


@dataclass
class DeployRequest:
    """What the user asked to deploy.

    Attributes:
        mode: Install or upgrade. Strings are accepted and parsed.
        chart_dir: Directory containing the chart and, by default, the .env file.
        env_file: Path to the .env file. Defaults to ``<chart_dir>/.env``.
        image_tag: Image tag for upgrades.
        profile_path: Optional YAML deploy profile.
        dry_run: Build the command without running it.
    """

    mode: DeployMode
    chart_dir: Path
    env_file: Path | None = None
    image_tag: str | None = None
    profile_path: Path | None = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        self.mode = DeployMode.parse(self.mode)
        self.chart_dir = Path(self.chart_dir).resolve()

    @property
    def env_path(self) -> Path:
        """The .env file to load."""
        if self.env_file is not None:
            return Path(self.env_file)
        return self.chart_dir / ENV_FILE_NAME


@dataclass
class DeploymentPlan:
    """A prepared deployment."""

    request: DeployRequest
    profile: DeployProfile
    environment: dict[str, str]
    values: dict[str, str]
    command: HelmCommand

    @property
    def secrets(self) -> list[str]:
        return self.command.secrets


def prepare_deployment(
    request: DeployRequest,
    base_env: Mapping[str, str] | None = None,
) -> DeploymentPlan:
    """Load configuration and build the helm command without running it.

    Args:
        request: The deployment request.
        base_env: Environment the .env file is overlaid on. Defaults to
            ``os.environ``.

    Raises:
        ConfigurationError: If the deploy profile is invalid.
        EnvFileError: If the .env file is missing or unreadable.
        MissingVariablesError: If required variables are unset or empty.
    """
    profile = load_profile(request.profile_path)

    file_values = load_env_file(request.env_path)
    environment = build_environment(file_values, base_env)
    check_required(environment, profile.required)

    values = resolve_values(profile, environment)
    secrets = [environment[name] for name in profile.required]

    command = build_helm_command(
        request.mode,
        profile,
        values,
        request.chart_dir,
        image_tag=request.image_tag,
        secrets=secrets,
    )
    logger.debug("Prepared %s of release '%s'", request.mode.value, profile.release_name)

    return DeploymentPlan(
        request=request,
        profile=profile,
        environment=environment,
        values=values,
        command=command,
    )


def deploy(
    request: DeployRequest,
    base_env: Mapping[str, str] | None = None,
) -> DeploymentPlan:
    """Prepare a deployment and run helm unless it is a dry run.

    Helm is never invoked when preparation fails.

    Raises:
        DeployerError: Any preparation error, or HelmError if helm fails.
    """
    plan = prepare_deployment(request, base_env)

    if request.dry_run:
        logger.info("Dry run, not executing: %s", plan.command.display())
        return plan

    run_helm_command(plan.command, plan.environment)
    return plan
