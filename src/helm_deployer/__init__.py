"""Helm Deployer - Deploy a Helm chart with secrets loaded from a .env file.

Helm Deployer reads key/value pairs from a ``.env`` file, checks that the
required secrets are present, and runs ``helm install`` or ``helm upgrade``
with the resolved values passed as ``--set`` flags.

Example:
    Deploy from the command line::

        $ helm-deploy install
        $ helm-deploy upgrade v1.2

    Or use the library programmatically::

        from pathlib import Path

        from helm_deployer.config.schema import DeployMode
        from helm_deployer.engine.deployer import DeployRequest, deploy

        request = DeployRequest(mode=DeployMode.UPGRADE, chart_dir=Path("."), image_tag="v1.2")
        plan = deploy(request)

Modules:
    config: .env loading, deploy profile schema, and ${VAR} resolution.
    engine: Helm command construction and deployment orchestration.
    cli: Command-line interface commands.
    exceptions: Custom exception hierarchy.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
