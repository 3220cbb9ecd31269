"""Custom exception hierarchy for ruff-fixer.

All custom exceptions inherit from RuffFixerError to enable:
- Unified exception handling in the CLI
- Clear distinction between fatal (tool/config) and isolated (file/issue) errors
"""

from pathlib import Path

__all__ = [
    "RuffFixerError",
    "ConfigError",
    "ToolError",
    "LinterOutputError",
    "FixError",
    "FileAccessError",
]


class RuffFixerError(Exception):
    """Base exception for all ruff-fixer errors."""

    pass


class ConfigError(RuffFixerError):
    """Configuration loading or validation error.

    Raised when:
    - The YAML config file is missing, unreadable or malformed
    - Pydantic validation of the merged settings fails
    - A required value (API key, root folder) is missing
    """

    pass


class ToolError(RuffFixerError):
    """Linter process failure.

    Fatal for the whole run: raised before any per-file work is dispatched,
    so no partial remediation state exists when it propagates.

    Attributes:
        exit_code: Process exit code, or -1 if the process never ran.
        stderr: Captured standard error.
        stdout: Captured standard output.

    """

    def __init__(
        self,
        message: str,
        exit_code: int = -1,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        """Initialize ToolError with the captured process output.

        Args:
            message: Human-readable description.
            exit_code: Process exit code (-1 when unavailable).
            stderr: Captured standard error.
            stdout: Captured standard output.

        """
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout


class LinterOutputError(ToolError):
    """Linter reported issues but its JSON payload could not be parsed.

    No issue list can be trusted once parsing fails, so this is fatal
    rather than a per-file error.
    """

    pass


class FixError(RuffFixerError):
    """Fix service call failed for a single issue.

    Covers transport failures, non-success status codes and responses
    without a usable content field. Never retried; the caller keeps the
    previous content and moves on to the next issue.

    Attributes:
        filename: File the fix was requested for.
        issue_code: Linter rule code of the issue being fixed.
        status_code: HTTP status code when the service answered, else None.

    """

    def __init__(
        self,
        message: str,
        filename: str = "",
        issue_code: str = "",
        status_code: int | None = None,
    ) -> None:
        """Initialize FixError with request context.

        Args:
            message: Description of the failure.
            filename: File the fix was requested for.
            issue_code: Linter rule code of the issue.
            status_code: HTTP status code, if a response was received.

        """
        super().__init__(message)
        self.filename = filename
        self.issue_code = issue_code
        self.status_code = status_code


class FileAccessError(RuffFixerError):
    """Reading or writing a source file failed.

    Isolated to the affected file; other files keep processing.

    Attributes:
        path: The file that could not be accessed.
        operation: "read" or "write".

    """

    def __init__(self, message: str, path: Path | str, operation: str) -> None:
        """Initialize FileAccessError.

        Args:
            message: Description of the failure.
            path: The file that could not be accessed.
            operation: "read" or "write".

        """
        super().__init__(message)
        self.path = Path(path)
        self.operation = operation
