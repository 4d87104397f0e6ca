"""Helm command construction and execution.

This module builds the argument vector for ``helm install`` and
``helm upgrade`` and runs it as a subprocess.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from helm_deployer.config.schema import DeployMode, DeployProfile
from helm_deployer.exceptions import HelmError

logger = logging.getLogger(__name__)

MASK = "****"


def mask_secrets(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of each secret in ``text`` with ``****``.

    Longer secrets are replaced first so a secret containing another one
    is never partially revealed.
    """
    for secret in sorted((s for s in secrets if s), key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


@dataclass
class HelmCommand:
    """A fully resolved helm invocation.

    Attributes:
        argv: Argument vector, starting with the helm binary.
        cwd: Directory the command runs in (the chart directory).
        secrets: Values that must never be displayed.
    """

    argv: list[str]
    cwd: Path
    secrets: list[str] = field(default_factory=list)

    def display(self) -> str:
        """Render the command as a shell line with secrets masked."""
        return shlex.join(mask_secrets(arg, self.secrets) for arg in self.argv)


def build_helm_command(
    mode: DeployMode,
    profile: DeployProfile,
    values: Mapping[str, str],
    chart_dir: Path,
    image_tag: str | None = None,
    secrets: Iterable[str] = (),
) -> HelmCommand:
    """Build the helm command for a deployment.

    Args:
        mode: Install or upgrade.
        profile: Release settings.
        values: Resolved helm values, passed as ``--set key=value`` in order.
        chart_dir: Directory containing the chart.
        image_tag: Image tag for upgrades. Empty or None falls back to the
            profile default.
        secrets: Values to mask when displaying the command.

    Returns:
        The helm command, ready to run.
    """
    argv = [profile.helm_binary, mode.value, profile.release_name, profile.chart]

    if profile.namespace:
        argv += ["--namespace", profile.namespace]

    if mode is DeployMode.UPGRADE:
        tag = image_tag or profile.default_image_tag
        argv += ["--set", f"{profile.image_tag_key}={tag}"]
    elif image_tag:
        logger.debug("Ignoring image tag '%s' for install", image_tag)

    for key, value in values.items():
        argv += ["--set", f"{key}={value}"]

    return HelmCommand(argv=argv, cwd=chart_dir, secrets=[s for s in secrets if s])


def run_helm_command(command: HelmCommand, env: Mapping[str, str]) -> int:
    """Run a helm command.

    Args:
        command: The command to run.
        env: Environment passed to the helm process.

    Returns:
        0 on success.

    Raises:
        HelmError: If helm cannot be started or exits with a non-zero code.
    """
    logger.info("Running: %s", command.display())

    try:
        result = subprocess.run(command.argv, cwd=command.cwd, env=dict(env), check=False)
    except FileNotFoundError as e:
        raise HelmError(
            f"Helm executable not found: {command.argv[0]}",
            suggestion="Install helm (https://helm.sh/docs/intro/install/) "
            "or set helm_binary in your deploy profile.",
        ) from e
    except OSError as e:
        raise HelmError(f"Failed to run helm: {e}") from e

    if result.returncode != 0:
        raise HelmError(
            f"helm {command.argv[1]} failed with exit code {result.returncode}",
            returncode=result.returncode,
            suggestion="Check the helm output above. Use 'upgrade' if the release "
            "already exists, or 'install' if it does not.",
        )

    return 0
