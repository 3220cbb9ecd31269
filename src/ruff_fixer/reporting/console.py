"""Console reporting surface for remediation progress.

The Reporter protocol is what file remediators talk to; ConsoleReporter is
the human-readable implementation printing to a rich Console. Reporters are
called from concurrent file tasks on one event loop, so output lines from
different files interleave but each call prints a complete block.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.markup import escape

from ruff_fixer.fix.models import FileOutcome, RemediationState
from ruff_fixer.linter.models import Issue
from ruff_fixer.reporting.diff import LineDiff, render_diff


class Reporter(Protocol):
    """Receives progress events from file remediation."""

    def stage(self, message: str) -> None:
        """A run-level step (format, check) started."""
        ...

    def file_started(self, filename: str, issue_count: int) -> None:
        """File processing began."""
        ...

    def fix_started(self, filename: str, issue: Issue) -> None:
        """A fix request for ``issue`` is about to be sent."""
        ...

    def fix_applied(self, filename: str, issue: Issue, diff: LineDiff) -> None:
        """A fix was accepted; ``diff`` compares pre- and post-content."""
        ...

    def fix_failed(self, filename: str, issue: Issue, error: Exception) -> None:
        """A fix request failed; content is unchanged."""
        ...

    def read_failed(self, filename: str, error: Exception) -> None:
        """The file could not be read; no fixes were attempted."""
        ...

    def write_failed(self, filename: str, error: Exception) -> None:
        """The final content could not be written."""
        ...

    def file_completed(self, outcome: FileOutcome) -> None:
        """The file reached a terminal state."""
        ...


class ConsoleReporter:
    """Print remediation progress and diffs to a rich Console.

    Progress lines and diffs go to ``console``; read, write and fix failures
    go to ``error_console`` (stderr by default). Diff and file text is escaped
    so rich never interprets source code brackets as markup.

    Attributes:
        console: Target console for progress and diffs.
        error_console: Target console for failures.
        show_diffs: Print a diff for each applied fix.

    """

    def __init__(
        self,
        console: Console | None = None,
        show_diffs: bool = True,
        error_console: Console | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            console: Console for progress (a new stdout console if None).
            show_diffs: Print a diff for each applied fix.
            error_console: Console for failures (a new stderr console if None).

        """
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.show_diffs = show_diffs

    def stage(self, message: str) -> None:
        """Print a run-level progress line."""
        self.console.print(escape(message))

    def file_started(self, filename: str, issue_count: int) -> None:
        """Print the processing banner for a file."""
        self.console.print(
            f"Processing file: [bold]{escape(filename)}[/bold] ({issue_count} issue(s))"
        )

    def fix_started(self, filename: str, issue: Issue) -> None:
        """Print which issue is being fixed."""
        self.console.print(f"Fixing issue in {escape(filename)}: {escape(issue.message)}")

    def fix_applied(self, filename: str, issue: Issue, diff: LineDiff) -> None:
        """Print the diff of an applied fix."""
        if not self.show_diffs:
            return
        for line in render_diff(diff):
            style = None
            if line.startswith("- "):
                style = "red"
            elif line.startswith("+ "):
                style = "green"
            self.console.print(escape(line), style=style, highlight=False)

    def fix_failed(self, filename: str, issue: Issue, error: Exception) -> None:
        """Print a per-issue failure."""
        self.error_console.print(
            f"[red]Error processing {escape(filename)}:[/red] "
            f"{escape(issue.message)}: {escape(str(error))}"
        )

    def read_failed(self, filename: str, error: Exception) -> None:
        """Print a read failure."""
        self.error_console.print(
            f"[red]Error reading {escape(filename)}:[/red] {escape(str(error))}"
        )

    def write_failed(self, filename: str, error: Exception) -> None:
        """Print a write failure."""
        self.error_console.print(
            f"[red]Error writing to {escape(filename)}:[/red] {escape(str(error))}"
        )

    def file_completed(self, outcome: FileOutcome) -> None:
        """Print the per-file result line."""
        name = escape(outcome.filename)
        if outcome.state in (RemediationState.READ_FAILED, RemediationState.WRITE_FAILED):
            # Already printed by read_failed/write_failed
            return
        if not outcome.succeeded:
            self.error_console.print(
                f"[red]Aborted {name}:[/red] {escape(outcome.error or outcome.state.value)}"
            )
        elif outcome.written:
            self.console.print(f"[green]✓[/green] Fixed issues in {name}")
        else:
            self.console.print(f"[yellow]{escape('[Dry run]')}[/yellow] Not writing {name}")
