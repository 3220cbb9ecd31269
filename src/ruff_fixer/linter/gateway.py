"""Linter process gateway.

Runs the external linter twice per remediation run:

1. ``<linter> format <root>`` - formats in place, only success matters.
2. ``<linter> check --fix <root> --output-format json`` - auto-fixes what the
   linter can fix itself and prints the remaining issues as a JSON array.

Exit code semantics of ``check``: 0 means nothing left to fix, 1 means issues
were emitted, anything else is a tool failure.
"""

import json
import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from ruff_fixer.core.exceptions import LinterOutputError, ToolError
from ruff_fixer.linter.models import CheckOutcome, CheckStatus, Issue

logger = logging.getLogger(__name__)

# Default timeout for linter commands
_LINTER_TIMEOUT = 300.0

# Exit codes of `check`
EXIT_CLEAN = 0
EXIT_ISSUES = 1


def parse_issues(payload: str) -> list[Issue]:
    """Parse the linter's JSON output into Issues.

    Args:
        payload: Raw stdout of ``check --output-format json``.

    Returns:
        Issues in emission order.

    Raises:
        LinterOutputError: If the payload is not a JSON array of issue objects.

    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise LinterOutputError(
            f"Failed to parse linter JSON output: {e}",
            exit_code=EXIT_ISSUES,
            stdout=payload,
        ) from e

    if not isinstance(data, list):
        raise LinterOutputError(
            f"Linter JSON output must be an array, got {type(data).__name__}",
            exit_code=EXIT_ISSUES,
            stdout=payload,
        )

    issues: list[Issue] = []
    for index, entry in enumerate(data):
        try:
            issues.append(Issue.model_validate(entry))
        except ValidationError as e:
            raise LinterOutputError(
                f"Malformed issue at index {index} in linter output: {e}",
                exit_code=EXIT_ISSUES,
                stdout=payload,
            ) from e
    return issues


class LinterGateway:
    """Invokes the linter executable and interprets its results.

    Attributes:
        linter_path: Executable name or path.
        timeout: Timeout in seconds for each invocation.

    """

    def __init__(self, linter_path: str = "ruff", timeout: float = _LINTER_TIMEOUT) -> None:
        """Initialize the gateway.

        Args:
            linter_path: Executable name or path.
            timeout: Timeout in seconds for each invocation.

        """
        self.linter_path = linter_path
        self.timeout = timeout

    def __repr__(self) -> str:
        """Return string representation for logging."""
        return f"LinterGateway(linter_path={self.linter_path!r})"

    def _run(self, args: list[str]) -> tuple[int, str, str]:
        """Run the linter and return exit code, stdout, stderr.

        Args:
            args: Linter arguments (without the executable).

        Returns:
            Tuple of (exit_code, stdout, stderr).

        Raises:
            ToolError: If the linter cannot be started or times out.

        """
        cmd = [self.linter_path, *args]
        logger.debug("Running linter: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolError(f"Linter timed out after {self.timeout}s: {' '.join(cmd)}") from e
        except FileNotFoundError as e:
            raise ToolError(f"Linter executable not found: {self.linter_path}") from e
        except OSError as e:
            raise ToolError(f"Cannot execute linter {self.linter_path}: {e}") from e
        return result.returncode, result.stdout or "", result.stderr or ""

    def format(self, root: Path) -> None:
        """Format all files under root in place.

        Args:
            root: Folder to format.

        Raises:
            ToolError: If the formatter exits non-zero.

        """
        exit_code, stdout, stderr = self._run(["format", str(root)])
        if exit_code != 0:
            raise ToolError(
                f"Linter format failed with exit code {exit_code}: {stderr.strip()}, {stdout.strip()}",
                exit_code=exit_code,
                stderr=stderr,
                stdout=stdout,
            )
        logger.debug("Format completed for %s", root)

    def check(self, root: Path) -> CheckOutcome:
        """Run check with auto-fix and classify the result.

        Args:
            root: Folder to check.

        Returns:
            CheckOutcome with CLEAN, ISSUES (parsed) or TOOL_FAILURE status.

        Raises:
            LinterOutputError: If exit code is 1 but the payload is malformed.
            ToolError: If the linter cannot be started.

        """
        exit_code, stdout, stderr = self._run(
            ["check", "--fix", str(root), "--output-format", "json"]
        )

        if exit_code == EXIT_CLEAN:
            logger.debug("Check reported no issues for %s", root)
            return CheckOutcome(status=CheckStatus.CLEAN, exit_code=exit_code)

        if exit_code == EXIT_ISSUES:
            issues = parse_issues(stdout)
            logger.debug("Check reported %d issues for %s", len(issues), root)
            return CheckOutcome(
                status=CheckStatus.ISSUES,
                issues=issues,
                exit_code=exit_code,
                stderr=stderr,
                stdout=stdout,
            )

        logger.error(
            "Linter check failed with exit code %d: %s, %s",
            exit_code,
            stderr.strip(),
            stdout.strip(),
        )
        return CheckOutcome(
            status=CheckStatus.TOOL_FAILURE,
            exit_code=exit_code,
            stderr=stderr,
            stdout=stdout,
        )
