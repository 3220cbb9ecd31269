"""End-to-end remediation pipeline.

format -> check -> group -> orchestrate. Linter failures are fatal and raised
before any file task exists; everything after that is best-effort and ends
up in the returned RunSummary.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from ruff_fixer.core.config import FixerConfig
from ruff_fixer.core.exceptions import ToolError
from ruff_fixer.fix.client import FixClient
from ruff_fixer.fix.models import FileOutcome
from ruff_fixer.fix.orchestrator import Orchestrator
from ruff_fixer.linter.gateway import LinterGateway
from ruff_fixer.linter.grouping import group_issues_by_file
from ruff_fixer.linter.models import CheckStatus
from ruff_fixer.reporting.console import Reporter

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Aggregate result of one remediation run.

    Attributes:
        check_status: Status of the initial check (CLEAN or ISSUES).
        issues_found: Issues reported by the check.
        outcomes: One outcome per remediated file.

    """

    check_status: CheckStatus
    issues_found: int = 0
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def files_processed(self) -> int:
        """Number of files dispatched."""
        return len(self.outcomes)

    @property
    def files_written(self) -> int:
        """Number of files written back."""
        return sum(1 for o in self.outcomes if o.written)

    @property
    def files_failed(self) -> int:
        """Number of files that ended in a failure state."""
        return sum(1 for o in self.outcomes if not o.succeeded)

    @property
    def fixes_applied(self) -> int:
        """Total applied fixes across files."""
        return sum(o.fixes_applied for o in self.outcomes)

    @property
    def fixes_failed(self) -> int:
        """Total failed fixes across files."""
        return sum(o.fixes_failed for o in self.outcomes)

    @property
    def is_clean(self) -> bool:
        """True if the check found nothing to fix."""
        return self.check_status is CheckStatus.CLEAN


async def run_fixer(
    config: FixerConfig,
    reporter: Reporter | None = None,
    gateway: LinterGateway | None = None,
) -> RunSummary:
    """Run the full remediation pipeline.

    Args:
        config: Run configuration.
        reporter: Optional progress sink.
        gateway: Linter gateway (built from config if None).

    Returns:
        RunSummary of the run.

    Raises:
        ToolError: If formatting fails, the check fails, or its output
            cannot be parsed.

    """
    gateway = gateway or LinterGateway(config.linter_path, timeout=config.linter_timeout_seconds)
    root = config.root_folder

    logger.info("Formatting code in %s", root)
    if reporter:
        reporter.stage(f"Formatting code in {root}...")
    gateway.format(root)

    logger.info("Running check on %s", root)
    if reporter:
        reporter.stage(f"Running check on {root}...")
    outcome = gateway.check(root)

    if outcome.status is CheckStatus.CLEAN:
        logger.info("No issues left in %s", root)
        return RunSummary(check_status=CheckStatus.CLEAN)

    if outcome.status is CheckStatus.TOOL_FAILURE:
        raise ToolError(
            f"Linter check failed with exit code {outcome.exit_code}: "
            f"{outcome.stderr.strip()}, {outcome.stdout.strip()}",
            exit_code=outcome.exit_code,
            stderr=outcome.stderr,
            stdout=outcome.stdout,
        )

    issue_groups = group_issues_by_file(outcome.issues)
    logger.info("Found %d issue(s) in %d file(s)", len(outcome.issues), len(issue_groups))

    async with httpx.AsyncClient(timeout=config.fix_service.timeout_seconds) as http:
        fix_client = FixClient(http, config.api_key, config.fix_service)
        orchestrator = Orchestrator(
            fix_client,
            reporter=reporter,
            max_concurrency=config.max_concurrency,
            dry_run=config.dry_run,
        )
        outcomes = await orchestrator.run(issue_groups)

    return RunSummary(
        check_status=CheckStatus.ISSUES,
        issues_found=len(outcome.issues),
        outcomes=outcomes,
    )


def run_fixer_sync(
    config: FixerConfig,
    reporter: Reporter | None = None,
    gateway: LinterGateway | None = None,
) -> RunSummary:
    """Blocking wrapper around run_fixer() for the CLI."""
    return asyncio.run(run_fixer(config, reporter=reporter, gateway=gateway))
