"""Exception hierarchy for Helm Deployer.

This module defines all custom exceptions used throughout the application.
All exceptions inherit from DeployerError and support optional suggestions
to help users resolve issues.
"""

from __future__ import annotations


class DeployerError(Exception):
    """Base exception for all Helm Deployer errors.

    Attributes:
        suggestion: Optional actionable advice for resolving the error.
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        """Initialize a DeployerError.

        Args:
            message: The error message describing what went wrong.
            suggestion: Optional advice for resolving the error.
        """
        self.suggestion = suggestion
        super().__init__(message)

    @property
    def message(self) -> str:
        """The error message without the suggestion."""
        return super().__str__()

    def __str__(self) -> str:
        """Format the error message with optional suggestion."""
        msg = super().__str__()
        if self.suggestion:
            msg += f"\n\n💡 Suggestion: {self.suggestion}"
        return msg


class EnvFileError(DeployerError):
    """Raised when the .env file is missing or cannot be read."""

    pass


class MissingVariablesError(DeployerError):
    """Raised when required environment variables are unset or empty.

    Attributes:
        missing: Names of the missing variables, in declared order.
    """

    def __init__(
        self,
        message: str,
        *,
        missing: list[str],
        suggestion: str | None = None,
    ) -> None:
        """Initialize a MissingVariablesError.

        Args:
            message: The error message describing what went wrong.
            missing: Names of the variables that are unset or empty.
            suggestion: Optional advice for resolving the error.
        """
        self.missing = list(missing)
        super().__init__(message, suggestion)


class ConfigurationError(DeployerError):
    """Raised when a deploy profile is invalid.

    This includes malformed YAML, schema validation failures, and
    unresolvable ${VAR} references.
    """

    pass


class InvalidModeError(DeployerError):
    """Raised when the deployment mode is not 'install' or 'upgrade'.

    Attributes:
        mode: The rejected mode string.
    """

    def __init__(self, mode: str, suggestion: str | None = None) -> None:
        self.mode = mode
        super().__init__(
            f"Invalid deployment mode: '{mode}'",
            suggestion or "Usage: helm-deploy {install|upgrade} [image_tag]",
        )


class HelmError(DeployerError):
    """Raised when the helm command cannot be run or exits non-zero.

    Attributes:
        returncode: Exit code reported by helm, or None if it never started.
    """

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.returncode = returncode
        super().__init__(message, suggestion)
