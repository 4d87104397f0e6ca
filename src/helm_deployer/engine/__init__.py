"""Deployment engine module for Helm Deployer.

This module builds helm commands and orchestrates deployments.
"""

from helm_deployer.engine.command import HelmCommand, build_helm_command, run_helm_command
from helm_deployer.engine.deployer import (
    DeploymentPlan,
    DeployRequest,
    deploy,
    prepare_deployment,
)

__all__ = [
    "DeployRequest",
    "DeploymentPlan",
    "HelmCommand",
    "build_helm_command",
    "deploy",
    "prepare_deployment",
    "run_helm_command",
]
