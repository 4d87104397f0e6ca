"""Entry point for running helm_deployer as a module.

Usage:
    python -m helm_deployer
"""

from helm_deployer.cli.app import app


def main() -> None:
    """Main entry point for the helm-deploy CLI."""
    app()


if __name__ == "__main__":
    main()
