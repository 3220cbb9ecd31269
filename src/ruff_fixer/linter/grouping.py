"""Group linter issues by file."""

from __future__ import annotations

from ruff_fixer.linter.models import Issue


def group_issues_by_file(issues: list[Issue]) -> dict[str, list[Issue]]:
    """Partition issues into per-file lists.

    Single stable pass: issues keep their emission order within a file and
    files appear in first-seen order. Nothing is filtered or deduplicated.

    Args:
        issues: Issues in linter emission order.

    Returns:
        Mapping of filename to that file's issues.

    """
    issues_by_file: dict[str, list[Issue]] = {}
    for issue in issues:
        issues_by_file.setdefault(issue.filename, []).append(issue)
    return issues_by_file
