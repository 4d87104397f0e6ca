"""CLI module for Helm Deployer.

This module provides the command-line interface using Typer.
"""

from helm_deployer.cli.app import app

__all__ = ["app"]
