"""Linter integration: issue models, process gateway and grouping."""

from ruff_fixer.linter.gateway import LinterGateway, parse_issues
from ruff_fixer.linter.grouping import group_issues_by_file
from ruff_fixer.linter.models import CheckOutcome, CheckStatus, Issue, Location

__all__ = [
    "CheckOutcome",
    "CheckStatus",
    "Issue",
    "LinterGateway",
    "Location",
    "group_issues_by_file",
    "parse_issues",
]
