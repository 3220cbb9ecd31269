"""Fan file remediation out across all files and wait for every one.

One asyncio task per file. Inside a task fixes run strictly in issue order,
so at most one fix request per in-flight file is outstanding. Across files
there is no ordering. A failing file never cancels its siblings: run() only
returns once every dispatched file has produced an outcome.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ruff_fixer.fix.models import FileOutcome
from ruff_fixer.fix.remediator import ContentFixer, FileRemediator

if TYPE_CHECKING:
    from ruff_fixer.linter.models import Issue
    from ruff_fixer.reporting.console import Reporter

logger = logging.getLogger(__name__)


class Orchestrator:
    """Run one FileRemediator per file concurrently.

    Attributes:
        fixer: Fix client shared by every file task.
        reporter: Optional progress sink shared by every file task.
        max_concurrency: Optional bound on simultaneously processed files.
        dry_run: Passed through to each remediator.

    Example:
        >>> orchestrator = Orchestrator(fix_client, reporter=ConsoleReporter())
        >>> outcomes = await orchestrator.run({"foo.py": [i0, i1], "bar.py": [i2]})
        >>> [o.fixes_applied for o in outcomes]
        [2, 1]

    """

    def __init__(
        self,
        fixer: ContentFixer,
        reporter: Reporter | None = None,
        max_concurrency: int | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            fixer: Fix client shared by every file task.
            reporter: Optional progress sink.
            max_concurrency: Max files in flight (None = unbounded).
            dry_run: Skip writes in every remediator.

        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.fixer = fixer
        self.reporter = reporter
        self.max_concurrency = max_concurrency
        self.dry_run = dry_run

    async def run(self, issue_groups: dict[str, list[Issue]]) -> list[FileOutcome]:
        """Remediate every file in ``issue_groups``.

        Args:
            issue_groups: Filename -> issues in linter order.

        Returns:
            One FileOutcome per file, in ``issue_groups`` key order.

        """
        if not issue_groups:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        filenames = list(issue_groups)
        logger.info(
            "Dispatching %d file(s), max_concurrency=%s",
            len(filenames),
            self.max_concurrency or "unbounded",
        )

        tasks = [
            self._run_file(filename, issue_groups[filename], semaphore) for filename in filenames
        ]
        outcomes = list(await asyncio.gather(*tasks))

        completed = sum(1 for o in outcomes if o.succeeded)
        logger.info("All files processed: %d/%d completed", completed, len(outcomes))
        return outcomes

    async def _run_file(
        self,
        filename: str,
        issues: list[Issue],
        semaphore: asyncio.Semaphore | None,
    ) -> FileOutcome:
        remediator = FileRemediator(
            filename,
            issues,
            self.fixer,
            reporter=self.reporter,
            dry_run=self.dry_run,
        )
        try:
            if semaphore is None:
                return await remediator.run()
            async with semaphore:
                return await remediator.run()
        except Exception as e:
            # Remediators report their own I/O and fix errors; anything else is a bug
            logger.exception("Unexpected error remediating %s", filename)
            outcome = FileOutcome(
                filename=filename,
                state=remediator.state,
                issues_total=len(issues),
                error=f"{type(e).__name__}: {e}",
            )
            if self.reporter:
                self.reporter.file_completed(outcome)
            return outcome
