"""Typer application definition for the Helm Deployer CLI.

This module defines the main Typer app, global options, and the
install, upgrade and check commands.
"""

from __future__ import annotations

import contextvars
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from helm_deployer import __version__
from helm_deployer.config.schema import DeployMode

# Create the main Typer app
app = typer.Typer(
    name="helm-deploy",
    help="Helm Deployer - Install or upgrade a Helm release with secrets from a .env file.",
    add_completion=False,
    invoke_without_command=True,
)

# Rich console for progress and errors (stderr), and for command output (stdout)
console = Console(stderr=True)
output_console = Console()

# Context variable for progress output (default True, disabled by --quiet)
verbose_mode: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "verbose_mode", default=True
)

ChartDirOption = Annotated[
    Path | None,
    typer.Option(
        "--chart-dir",
        "-C",
        help="Directory containing the chart and the .env file. Defaults to the current directory.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]
EnvFileOption = Annotated[
    Path | None,
    typer.Option(
        "--env-file",
        "-e",
        help="Path to the .env file. Defaults to <chart-dir>/.env.",
        dir_okay=False,
    ),
]
ProfileOption = Annotated[
    Path | None,
    typer.Option(
        "--profile",
        "-p",
        help="YAML deploy profile overriding the release settings.",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]
DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Print the helm command (secrets masked) without running it.",
    ),
]


def is_verbose() -> bool:
    """Check if progress output is enabled (default True)."""
    return verbose_mode.get()


def format_error(error: Exception) -> Panel:
    """Format an exception for Rich console display.

    Creates a styled Panel with the error message and suggestion (if
    available).

    Args:
        error: The exception to format.

    Returns:
        Rich Panel with formatted error content.
    """
    from helm_deployer.exceptions import DeployerError, MissingVariablesError

    content = Text()

    if isinstance(error, DeployerError):
        content.append(error.message, style="bold red")

        if isinstance(error, MissingVariablesError):
            for name in error.missing:
                content.append("\n  • ", style="yellow")
                content.append(name, style="cyan")

        if error.suggestion:
            content.append("\n\n")
            content.append("💡 Suggestion: ", style="green")
            content.append(error.suggestion, style="white")
    else:
        content.append(str(error), style="red")

    return Panel(
        content,
        title=f"[bold red]❌ {type(error).__name__}[/bold red]",
        border_style="red",
        padding=(1, 2),
    )


def print_error(error: Exception) -> None:
    """Print a formatted error to stderr."""
    console.print(format_error(error))


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("helm_deployer")
    if not verbose:
        package_logger.setLevel(logging.NOTSET)
        for handler in [h for h in package_logger.handlers if isinstance(h, RichHandler)]:
            package_logger.removeHandler(handler)
        return
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=console, show_path=False))


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        output_console.print(f"Helm Deployer v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Show debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress messages.",
        ),
    ] = False,
    chart_dir: ChartDirOption = None,
    env_file: EnvFileOption = None,
    profile: ProfileOption = None,
) -> None:
    """Helm Deployer - Install or upgrade a Helm release with secrets from a .env file.

    Runs 'install' when no command is given. --chart-dir, --env-file and
    --profile given here apply to any command that does not set its own.
    """
    verbose_mode.set(not quiet)
    _configure_logging(verbose)
    ctx.obj = {"chart_dir": chart_dir, "env_file": env_file, "profile": profile}

    if ctx.invoked_subcommand is None:
        chart_dir, env_file, profile = _locations(ctx, None, None, None)
        _run(DeployMode.INSTALL, chart_dir, env_file, profile, None, dry_run=False)


def _locations(
    ctx: typer.Context,
    chart_dir: Path | None,
    env_file: Path | None,
    profile: Path | None,
) -> tuple[Path, Path | None, Path | None]:
    """Fill unset command options from the global ones, then the current directory."""
    shared = ctx.obj or {}
    chart_dir = chart_dir or shared.get("chart_dir") or Path.cwd()
    return chart_dir, env_file or shared.get("env_file"), profile or shared.get("profile")


def _run(
    mode: DeployMode,
    chart_dir: Path,
    env_file: Path | None,
    profile: Path | None,
    image_tag: str | None,
    *,
    dry_run: bool,
) -> None:
    from helm_deployer.cli.deploy import run_deployment
    from helm_deployer.exceptions import DeployerError

    try:
        run_deployment(
            mode,
            chart_dir,
            env_file=env_file,
            profile_path=profile,
            image_tag=image_tag,
            dry_run=dry_run,
            console=output_console,
        )
    except DeployerError as e:
        print_error(e)
        raise typer.Exit(code=1) from None


@app.command()
def install(
    ctx: typer.Context,
    chart_dir: ChartDirOption = None,
    env_file: EnvFileOption = None,
    profile: ProfileOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Install the Helm release.

    \b
    Examples:
        helm-deploy install
        helm-deploy install --chart-dir ./chart --env-file ./secrets.env
        helm-deploy install --dry-run
        helm-deploy --chart-dir ./chart
    """
    chart_dir, env_file, profile = _locations(ctx, chart_dir, env_file, profile)
    _run(DeployMode.INSTALL, chart_dir, env_file, profile, None, dry_run=dry_run)


@app.command()
def upgrade(
    ctx: typer.Context,
    image_tag: Annotated[
        str | None,
        typer.Argument(
            help="Image tag to deploy. Defaults to the profile's default (v1.0).",
            show_default=False,
        ),
    ] = None,
    chart_dir: ChartDirOption = None,
    env_file: EnvFileOption = None,
    profile: ProfileOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Upgrade the Helm release, optionally to a new image tag.

    \b
    Examples:
        helm-deploy upgrade
        helm-deploy upgrade v1.2
        helm-deploy upgrade v1.2 --dry-run
    """
    chart_dir, env_file, profile = _locations(ctx, chart_dir, env_file, profile)
    _run(DeployMode.UPGRADE, chart_dir, env_file, profile, image_tag, dry_run=dry_run)


@app.command()
def check(
    ctx: typer.Context,
    chart_dir: ChartDirOption = None,
    env_file: EnvFileOption = None,
    profile: ProfileOption = None,
) -> None:
    """Check the .env file and show the values helm would receive.

    Secrets are masked. Helm is never run.

    \b
    Examples:
        helm-deploy check
        helm-deploy check --env-file ./secrets.env
    """
    from helm_deployer.cli.deploy import check_environment
    from helm_deployer.exceptions import DeployerError

    chart_dir, env_file, profile = _locations(ctx, chart_dir, env_file, profile)
    try:
        check_environment(
            chart_dir,
            env_file=env_file,
            profile_path=profile,
            console=output_console,
        )
    except DeployerError as e:
        print_error(e)
        raise typer.Exit(code=1) from None
