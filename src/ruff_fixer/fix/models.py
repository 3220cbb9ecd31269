"""Per-file remediation state and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ruff_fixer.linter.models import Issue


class RemediationState(str, Enum):
    """Lifecycle of one file's remediation.

    READING -> FIXING -> WRITING -> DONE, with READ_FAILED and WRITE_FAILED
    as terminal failures. A failed fix is not a state: the file stays in
    FIXING and moves on to the next issue.
    """

    READING = "reading"
    FIXING = "fixing"
    WRITING = "writing"
    DONE = "done"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"

    @property
    def is_terminal(self) -> bool:
        """True for DONE and both failure states."""
        return self in (
            RemediationState.DONE,
            RemediationState.READ_FAILED,
            RemediationState.WRITE_FAILED,
        )


@dataclass
class FileWorkUnit:
    """Mutable state of one file while it is being remediated.

    Owned by exactly one task, so no locking is needed.

    Attributes:
        filename: File being remediated.
        issues: Issues to fix, in linter order.
        current_content: Latest accepted content; replaced on each successful fix.
        state: Current lifecycle state.

    """

    filename: str
    issues: list[Issue]
    current_content: str = ""
    state: RemediationState = RemediationState.READING


@dataclass
class FileOutcome:
    """Result of remediating one file.

    Attributes:
        filename: The file.
        state: Final state (DONE, READ_FAILED or WRITE_FAILED).
        issues_total: Number of issues assigned to the file.
        fixes_applied: Issues whose fix request succeeded.
        fixes_failed: Issues whose fix request failed.
        written: Whether the final content was written back.
        error: Description of the terminal error, if any.

    """

    filename: str
    state: RemediationState
    issues_total: int = 0
    fixes_applied: int = 0
    fixes_failed: int = 0
    written: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True if the file reached DONE."""
        return self.state is RemediationState.DONE
