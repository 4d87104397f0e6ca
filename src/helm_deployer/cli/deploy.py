"""Implementation of the 'helm-deploy install', 'upgrade' and 'check' commands.

This module provides helper functions for running deployments and
displaying their results.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from helm_deployer.config.schema import DeployMode
from helm_deployer.engine.command import mask_secrets, run_helm_command
from helm_deployer.engine.deployer import DeploymentPlan, DeployRequest, prepare_deployment

# Console for progress messages (stderr)
_verbose_console = Console(stderr=True, highlight=False)


def verbose_log(message: str, style: str = "dim") -> None:
    """Log a progress message unless --quiet was given.

    Args:
        message: The message to log.
        style: Rich style for the message.
    """
    from helm_deployer.cli.app import is_verbose

    if is_verbose():
        _verbose_console.print(f"[{style}]{message}[/{style}]")


def run_deployment(
    mode: DeployMode,
    chart_dir: Path,
    *,
    env_file: Path | None = None,
    profile_path: Path | None = None,
    image_tag: str | None = None,
    dry_run: bool = False,
    console: Console | None = None,
) -> DeploymentPlan:
    """Run an install or upgrade and report progress.

    Args:
        mode: Install or upgrade.
        chart_dir: Directory containing the chart.
        env_file: Optional .env path override.
        profile_path: Optional YAML deploy profile.
        image_tag: Image tag for upgrades.
        dry_run: Print the masked command instead of running it.
        console: Console receiving the dry-run command.

    Returns:
        The executed (or, for dry runs, prepared) deployment plan.

    Raises:
        DeployerError: If any step fails.
    """
    output_console = console if console is not None else Console()

    request = DeployRequest(
        mode=mode,
        chart_dir=chart_dir,
        env_file=env_file,
        image_tag=image_tag,
        profile_path=profile_path,
        dry_run=dry_run,
    )

    verbose_log(f"Loading .env file {request.env_path}...")
    plan = prepare_deployment(request)

    if dry_run:
        output_console.print(
            plan.command.display(), markup=False, highlight=False, soft_wrap=True
        )
        verbose_log("Dry run: helm was not executed.", style="yellow")
        return plan

    verbose_log(f"Running helm {request.mode.value}...", style="cyan")
    run_helm_command(plan.command, plan.environment)
    verbose_log("Deployment complete!", style="bold green")
    return plan


def check_environment(
    chart_dir: Path,
    *,
    env_file: Path | None = None,
    profile_path: Path | None = None,
    console: Console | None = None,
) -> DeploymentPlan:
    """Validate the .env file and display the resolved helm values.

    Helm is never run.

    Raises:
        DeployerError: If the profile, .env file, or required variables are invalid.
    """
    output_console = console if console is not None else Console()

    request = DeployRequest(
        mode=DeployMode.INSTALL,
        chart_dir=chart_dir,
        env_file=env_file,
        profile_path=profile_path,
        dry_run=True,
    )

    verbose_log(f"Loading .env file {request.env_path}...")
    plan = prepare_deployment(request)
    display_values(plan.profile.release_name, plan.values, set(plan.secrets), output_console)
    return plan


def display_values(
    release_name: str,
    values: dict[str, str],
    secrets: set[str],
    console: Console,
) -> None:
    """Display helm values in a table, masking secrets and flagging empty values."""
    table = Table(title=f"Release: {release_name}", show_header=True, header_style="bold")
    table.add_column("Helm value", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")

    for key, value in values.items():
        if not value:
            shown = "[yellow](empty)[/yellow]"
        else:
            shown = escape(mask_secrets(value, secrets))
        table.add_row(key, shown)

    console.print(table)
    console.print("[bold green]✓[/bold green] All required variables are set.")
