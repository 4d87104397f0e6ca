"""Test that the exceptions module works correctly."""

from helm_deployer.exceptions import (
    ConfigurationError,
    DeployerError,
    EnvFileError,
    HelmError,
    InvalidModeError,
    MissingVariablesError,
)


class TestDeployerError:
    """Tests for the base DeployerError class."""

    def test_basic_error_message(self) -> None:
        """Test that basic error message is preserved."""
        error = DeployerError("Something went wrong")
        assert str(error) == "Something went wrong"

    def test_error_with_suggestion(self) -> None:
        """Test that error message includes suggestion when provided."""
        error = DeployerError("Something went wrong", suggestion="Try doing X instead")
        assert "Something went wrong" in str(error)
        assert "💡 Suggestion: Try doing X instead" in str(error)

    def test_message_excludes_suggestion(self) -> None:
        """Test that the message property omits the suggestion."""
        error = DeployerError("Broken", suggestion="Fix it")
        assert error.message == "Broken"
        assert error.suggestion == "Fix it"

    def test_no_suggestion(self) -> None:
        """Test that suggestion is None when not provided."""
        assert DeployerError("Error").suggestion is None


class TestSubclasses:
    """Tests for specific exception types."""

    def test_hierarchy(self) -> None:
        """Test that every error inherits from DeployerError."""
        for cls in (EnvFileError, ConfigurationError):
            assert issubclass(cls, DeployerError)
        assert isinstance(MissingVariablesError("x", missing=["A"]), DeployerError)
        assert isinstance(InvalidModeError("x"), DeployerError)
        assert isinstance(HelmError("x"), DeployerError)

    def test_missing_variables_attributes(self) -> None:
        """Test that missing variable names are kept."""
        error = MissingVariablesError("Missing", missing=["A", "B"])
        assert error.missing == ["A", "B"]

    def test_invalid_mode_has_usage(self) -> None:
        """Test that InvalidModeError carries a usage suggestion."""
        error = InvalidModeError("rollback")
        assert error.mode == "rollback"
        assert "rollback" in error.message
        assert "install|upgrade" in (error.suggestion or "")

    def test_helm_error_returncode(self) -> None:
        """Test that HelmError keeps the exit code."""
        assert HelmError("failed", returncode=3).returncode == 3
        assert HelmError("not found").returncode is None
