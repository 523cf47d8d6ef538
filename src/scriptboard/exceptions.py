"""Custom exception hierarchy for ScriptBoard with helpful error messages."""

from __future__ import annotations

from typing import Any


class ScriptBoardError(Exception):
    """Base exception with helpful formatting for all ScriptBoard errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(ScriptBoardError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class ScriptBoardFileNotFoundError(ScriptBoardError):
    """File not found errors with helpful path information."""

    pass


class ValidationError(ScriptBoardError):
    """Input validation errors with details about what was expected."""

    pass


class BlockIndexError(ValidationError):
    """A block mutation addressed an index that does not exist or is protected."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        block_count: int | None = None,
    ) -> None:
        """Initialize block index error.

        Args:
            message: Error message
            index: The offending block index
            block_count: Number of blocks in the document at the time
        """
        self.index = index
        self.block_count = block_count
        details: dict[str, Any] = {}
        if index is not None:
            details["index"] = index
        if block_count is not None:
            details["block_count"] = block_count
        hint = None
        if block_count is not None:
            hint = (
                f"Valid block indices are 1..{block_count - 1}; "
                "index 0 is the preamble"
            )
        super().__init__(message=message, hint=hint, details=details or None)


class ExportError(ScriptBoardError):
    """Errors raised while producing an export document."""

    pass


class LLMError(ScriptBoardError):
    """LLM provider errors including authentication and API issues."""

    pass


class LLMProviderError(LLMError):
    """Generic LLM provider error for non-configuration failures."""

    pass


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "api_key": "llm_api_key",  # pragma: allowlist secret
        "gemini_api_key": "llm_api_key",  # pragma: allowlist secret
        "model": "llm_model",
        "endpoint": "llm_endpoint",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
