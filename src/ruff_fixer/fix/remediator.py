"""Single-file remediation: read once, fix issues in order, write once.

The remediator walks a FileWorkUnit through READING -> FIXING -> WRITING ->
DONE. Each issue is sent to the fixer with the content produced by the
previous successful fix. A failed fix is reported and skipped; the content
stays as it was and the next issue builds on it. The file is written exactly
once, after every issue has been attempted.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ruff_fixer.core.exceptions import FileAccessError, FixError
from ruff_fixer.fix.models import FileOutcome, FileWorkUnit, RemediationState
from ruff_fixer.reporting.diff import compute_line_diff

if TYPE_CHECKING:
    from ruff_fixer.linter.models import Issue
    from ruff_fixer.reporting.console import Reporter

logger = logging.getLogger(__name__)


class ContentFixer(Protocol):
    """Anything that can propose fixed content for one issue."""

    async def propose_fix(self, filename: str, issue: Issue, current_content: str) -> str:
        """Return replacement content or raise FixError."""
        ...


def _read_file(path: Path) -> str:
    # newline="" keeps CRLF files byte-identical on rewrite
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def _write_file(path: Path, content: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(content)


class FileRemediator:
    """Remediate the issues of one file sequentially.

    Attributes:
        unit: The file's work state; owned exclusively by this remediator.
        fixer: Shared fix client.
        reporter: Optional progress sink.
        dry_run: Skip the write phase.

    """

    def __init__(
        self,
        filename: str,
        issues: list[Issue],
        fixer: ContentFixer,
        reporter: Reporter | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the remediator.

        Args:
            filename: File to remediate.
            issues: Issues of that file, in linter order.
            fixer: Fix client shared across files.
            reporter: Optional progress sink.
            dry_run: Report diffs without writing the file.

        """
        self.unit = FileWorkUnit(filename=filename, issues=list(issues))
        self.fixer = fixer
        self.reporter = reporter
        self.dry_run = dry_run

    @property
    def state(self) -> RemediationState:
        """Current lifecycle state."""
        return self.unit.state

    async def run(self) -> FileOutcome:
        """Drive the file through its full lifecycle.

        Never raises for read, fix or write failures; they are reported and
        reflected in the returned outcome.

        Returns:
            FileOutcome with the final state and fix counters.

        """
        unit = self.unit
        outcome = FileOutcome(
            filename=unit.filename,
            state=unit.state,
            issues_total=len(unit.issues),
        )
        if self.reporter:
            self.reporter.file_started(unit.filename, len(unit.issues))

        try:
            unit.current_content = await self._read()
        except FileAccessError as e:
            unit.state = RemediationState.READ_FAILED
            logger.error("Error reading %s: %s", unit.filename, e)
            if self.reporter:
                self.reporter.read_failed(unit.filename, e)
            return self._finish(outcome, error=str(e))

        unit.state = RemediationState.FIXING
        for issue in unit.issues:
            if await self._fix_one(issue):
                outcome.fixes_applied += 1
            else:
                outcome.fixes_failed += 1

        if self.dry_run:
            logger.debug("Dry run: skipping write of %s", unit.filename)
            unit.state = RemediationState.DONE
            return self._finish(outcome)

        unit.state = RemediationState.WRITING
        try:
            await self._write()
        except FileAccessError as e:
            unit.state = RemediationState.WRITE_FAILED
            logger.error("Error writing to %s: %s", unit.filename, e)
            if self.reporter:
                self.reporter.write_failed(unit.filename, e)
            return self._finish(outcome, error=str(e))

        unit.state = RemediationState.DONE
        outcome.written = True
        logger.info(
            "Fixed issues in %s (%d applied, %d failed)",
            unit.filename,
            outcome.fixes_applied,
            outcome.fixes_failed,
        )
        return self._finish(outcome)

    async def _fix_one(self, issue: Issue) -> bool:
        """Attempt one fix against the current content.

        Returns:
            True if the fix was applied, False if it failed.

        """
        unit = self.unit
        if self.reporter:
            self.reporter.fix_started(unit.filename, issue)

        before = unit.current_content
        try:
            after = await self.fixer.propose_fix(unit.filename, issue, before)
        except FixError as e:
            logger.warning(
                "Error processing %s: %s [%s]: %s",
                unit.filename,
                issue.message,
                issue.code or "no code",
                e,
            )
            if self.reporter:
                self.reporter.fix_failed(unit.filename, issue, e)
            return False

        if self.reporter:
            self.reporter.fix_applied(unit.filename, issue, compute_line_diff(before, after))
        unit.current_content = after
        return True

    async def _read(self) -> str:
        path = Path(self.unit.filename)
        try:
            return await asyncio.to_thread(_read_file, path)
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Cannot read {path}: {e}", path, "read") from e

    async def _write(self) -> None:
        path = Path(self.unit.filename)
        try:
            await asyncio.to_thread(_write_file, path, self.unit.current_content)
        except (OSError, UnicodeEncodeError) as e:
            raise FileAccessError(f"Cannot write {path}: {e}", path, "write") from e

    def _finish(self, outcome: FileOutcome, error: str | None = None) -> FileOutcome:
        outcome.state = self.unit.state
        outcome.error = error
        if self.reporter:
            self.reporter.file_completed(outcome)
        return outcome
