"""
Error types for Jabuti tooling.

The analysis core never raises for malformed DSL text; these errors cover
the surfaces around it (settings files, CLI file handling).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class JabutiError(Exception):
    """Base exception for all Jabuti errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(JabutiError):
    """
    Raised when a jabuti.toml settings file cannot be used.

    Examples:
    - Invalid TOML syntax
    - Wrong value type for a known key
    - Out-of-range values (e.g. indent_size < 1)
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        file: Path to the file where the error occurred
        line: Line number (1-indexed), 0 when unknown
        column: Column number (1-indexed), 0 when unknown
        snippet: Optional source line shown under the location
    """

    file: Path
    line: int = 0
    column: int = 0
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            "file:line:column", or just "file" when no line is known
        """
        if self.line:
            location = f"{self.file}:{self.line}:{self.column}"
        else:
            location = str(self.file)

        if self.snippet:
            marker = " " * max(self.column - 1, 0) + "^^^"
            return f"{location}\n    {self.snippet}\n    {marker}"
        return location


def make_config_error(
    message: str,
    file: Path,
    line: int | None = None,
    column: int | None = None,
    snippet: str | None = None,
) -> ConfigError:
    """
    Helper to create a ConfigError with context.

    Args:
        message: Error description
        file: Settings file path
        line: Optional line number (1-indexed)
        column: Optional column number (1-indexed)
        snippet: Optional offending source line

    Returns:
        ConfigError with context attached
    """
    context = ErrorContext(file=file, line=line or 0, column=column or 0, snippet=snippet)
    return ConfigError(message, context)
