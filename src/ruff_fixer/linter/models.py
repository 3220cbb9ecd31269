"""Linter issue models.

Provides the Location and Issue Pydantic models parsed from the linter's
JSON output, plus CheckOutcome describing the result of a check run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Location(BaseModel):
    """Position of an issue in the file as scanned.

    Attributes:
        row: 1-indexed line number in the original content.
        column: 1-indexed column number.

    """

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0, description="1-indexed line number")
    column: int = Field(ge=0, description="1-indexed column number")


class Issue(BaseModel):
    """A single finding reported by the linter.

    Extra keys in the linter payload (end_location, fix, url, ...) are
    ignored. The row is never recomputed after a fix mutates the file.

    Attributes:
        filename: Path of the affected file as reported by the linter.
        code: Rule code (e.g., "F401"); empty for syntax errors.
        message: Human-readable description.
        location: Where the issue was found.

    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(min_length=1, description="Affected file")
    code: str = Field(default="", description="Rule code")
    message: str = Field(description="Issue description")
    location: Location

    @field_validator("code", mode="before")
    @classmethod
    def null_code_to_empty(cls, v: str | None) -> str:
        """Ruff reports syntax errors with a null code."""
        return "" if v is None else v

    @property
    def row(self) -> int:
        """Shortcut for ``location.row``."""
        return self.location.row

    def describe(self) -> str:
        """Return a one-line summary for progress output."""
        prefix = f"{self.code} " if self.code else ""
        return f"{prefix}{self.message} (line {self.location.row})"


class CheckStatus(str, Enum):
    """Result classification of a linter check run."""

    CLEAN = "clean"
    ISSUES = "issues"
    TOOL_FAILURE = "tool_failure"


@dataclass
class CheckOutcome:
    """Result of a linter check run.

    Attributes:
        status: CLEAN (exit 0), ISSUES (exit 1) or TOOL_FAILURE (anything else).
        issues: Parsed issues, in emission order (ISSUES only).
        exit_code: Process exit code.
        stderr: Captured standard error.
        stdout: Captured standard output.

    """

    status: CheckStatus
    issues: list[Issue] = field(default_factory=list)
    exit_code: int = 0
    stderr: str = ""
    stdout: str = ""
