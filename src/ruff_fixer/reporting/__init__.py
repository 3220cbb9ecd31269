"""Diff computation and progress reporting."""

from ruff_fixer.reporting.console import ConsoleReporter, Reporter
from ruff_fixer.reporting.diff import (
    DiffKind,
    DiffLine,
    LineDiff,
    compute_line_diff,
    render_diff,
    split_lines,
)

__all__ = [
    "ConsoleReporter",
    "DiffKind",
    "DiffLine",
    "LineDiff",
    "Reporter",
    "compute_line_diff",
    "render_diff",
    "split_lines",
]
