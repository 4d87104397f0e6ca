"""Tests for helm command construction and execution."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from helm_deployer.config.schema import DeployMode, DeployProfile
from helm_deployer.engine.command import (
    HelmCommand,
    build_helm_command,
    mask_secrets,
    run_helm_command,
)
from helm_deployer.exceptions import HelmError

VALUES = {
    "env.notionApiKey": "n-secret",
    "env.geminiApiKey": "g-secret",
    "env.serperApiKey": "s-secret",
    "env.notionParentPageId": "pid",
    "env.notionParentPageUrl": "https://example.com/p",
}


class TestBuildHelmCommand:
    """Tests for build_helm_command."""

    def test_install(self, tmp_path: Path) -> None:
        """Test the install command carries all five values."""
        command = build_helm_command(DeployMode.INSTALL, DeployProfile(), VALUES, tmp_path)
        assert command.argv == [
            "helm", "install", "research-team", ".",
            "--set", "env.notionApiKey=n-secret",
            "--set", "env.geminiApiKey=g-secret",
            "--set", "env.serperApiKey=s-secret",
            "--set", "env.notionParentPageId=pid",
            "--set", "env.notionParentPageUrl=https://example.com/p",
        ]
        assert command.cwd == tmp_path

    def test_upgrade_default_tag(self, tmp_path: Path) -> None:
        """Test that upgrade defaults the image tag to v1.0."""
        command = build_helm_command(DeployMode.UPGRADE, DeployProfile(), VALUES, tmp_path)
        assert command.argv[:6] == [
            "helm", "upgrade", "research-team", ".", "--set", "image.tag=v1.0",
        ]
        assert len(command.argv) == 16

    def test_upgrade_explicit_tag(self, tmp_path: Path) -> None:
        """Test that an explicit tag is used."""
        command = build_helm_command(
            DeployMode.UPGRADE, DeployProfile(), VALUES, tmp_path, image_tag="v3.1"
        )
        assert "image.tag=v3.1" in command.argv

    def test_upgrade_empty_tag_uses_default(self, tmp_path: Path) -> None:
        """Test that an empty tag falls back to the profile default."""
        command = build_helm_command(
            DeployMode.UPGRADE, DeployProfile(), VALUES, tmp_path, image_tag=""
        )
        assert command.argv[5] == "image.tag=v1.0"

    def test_install_ignores_tag(self, tmp_path: Path) -> None:
        """Test that install never sets the image tag."""
        command = build_helm_command(
            DeployMode.INSTALL, DeployProfile(), VALUES, tmp_path, image_tag="v3.1"
        )
        assert not any(arg.startswith("image.tag=") for arg in command.argv)

    def test_namespace_and_binary(self, tmp_path: Path) -> None:
        """Test profile overrides for namespace and helm binary."""
        profile = DeployProfile(namespace="research", helm_binary="/usr/local/bin/helm")
        command = build_helm_command(DeployMode.INSTALL, profile, {}, tmp_path)
        assert command.argv == [
            "/usr/local/bin/helm", "install", "research-team", ".", "--namespace", "research",
        ]

    def test_value_with_spaces_is_single_arg(self, tmp_path: Path) -> None:
        """Test that values are passed without shell splitting."""
        command = build_helm_command(
            DeployMode.INSTALL, DeployProfile(), {"env.note": "a b c"}, tmp_path
        )
        assert command.argv[-1] == "env.note=a b c"


class TestHelmCommandDisplay:
    """Tests for masked command display."""

    def test_secrets_masked(self, tmp_path: Path) -> None:
        """Test that secrets never appear in the display."""
        command = build_helm_command(
            DeployMode.INSTALL, DeployProfile(), VALUES, tmp_path,
            secrets=["n-secret", "g-secret", "s-secret"],
        )
        shown = command.display()
        assert "n-secret" not in shown
        assert "env.notionApiKey=****" in shown
        assert "env.notionParentPageId=pid" in shown

    def test_secret_inside_composite_value_masked(self, tmp_path: Path) -> None:
        """Test that a secret embedded in a longer value is masked."""
        command = build_helm_command(
            DeployMode.INSTALL, DeployProfile(), {"env.auth": "Bearer g-secret"}, tmp_path,
            secrets=["g-secret"],
        )
        shown = command.display()
        assert "g-secret" not in shown
        assert "env.auth=Bearer ****" in shown

    def test_display_quotes_spaces(self, tmp_path: Path) -> None:
        """Test that display output is shell quoted."""
        command = HelmCommand(argv=["helm", "install", "r", ".", "--set", "k=a b"], cwd=tmp_path)
        assert command.display() == "helm install r . --set 'k=a b'"


class TestMaskSecrets:
    """Tests for mask_secrets."""

    def test_every_occurrence_masked(self) -> None:
        """Test that repeated secrets are all replaced."""
        assert mask_secrets("abc:abc", ["abc"]) == "****:****"

    def test_longest_secret_first(self) -> None:
        """Test that a secret containing a shorter one is masked whole."""
        assert mask_secrets("token=abcdef", ["abc", "abcdef"]) == "token=****"

    def test_empty_secret_ignored(self) -> None:
        """Test that empty secrets leave the text unchanged."""
        assert mask_secrets("value", ["", "zzz"]) == "value"


class TestRunHelmCommand:
    """Tests for run_helm_command."""

    def test_success(self, tmp_path: Path) -> None:
        """Test that a zero exit code returns 0."""
        command = HelmCommand(argv=["helm", "install", "r", "."], cwd=tmp_path)
        completed = subprocess.CompletedProcess(command.argv, 0)
        with patch("helm_deployer.engine.command.subprocess.run", return_value=completed) as run:
            assert run_helm_command(command, {"A": "1"}) == 0

        run.assert_called_once_with(
            ["helm", "install", "r", "."], cwd=tmp_path, env={"A": "1"}, check=False
        )

    def test_non_zero_exit(self, tmp_path: Path) -> None:
        """Test that helm failures raise HelmError with the exit code."""
        command = HelmCommand(argv=["helm", "upgrade", "r", "."], cwd=tmp_path)
        completed = subprocess.CompletedProcess(command.argv, 1)
        with patch("helm_deployer.engine.command.subprocess.run", return_value=completed):
            with pytest.raises(HelmError, match="exit code 1") as exc_info:
                run_helm_command(command, {})
        assert exc_info.value.returncode == 1

    def test_missing_binary(self, tmp_path: Path) -> None:
        """Test that a missing helm binary raises HelmError."""
        command = HelmCommand(argv=["helm", "install", "r", "."], cwd=tmp_path)
        with patch(
            "helm_deployer.engine.command.subprocess.run",
            side_effect=FileNotFoundError("helm"),
        ):
            with pytest.raises(HelmError, match="not found"):
                run_helm_command(command, {})
