"""Shared fixtures for ruff-fixer tests.

## Fixtures

- `make_issue` - factory for Issue instances with sensible defaults
- `recording_reporter` - Reporter that records every event in order
- `fake_fixer_factory` - builds a scripted fixer that records every call

## Usage Example

```python
@pytest.mark.asyncio
async def test_fix(tmp_path, make_issue, fake_fixer_factory):
    fixer = fake_fixer_factory(lambda issue, content: content + "# fixed\\n")
    ...
    assert fixer.calls[0].content == "x = 1\\n"
```
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from ruff_fixer.core.exceptions import FixError
from ruff_fixer.fix.models import FileOutcome
from ruff_fixer.linter.models import Issue, Location
from ruff_fixer.reporting.diff import LineDiff


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Return a factory for Issue instances."""

    def _make(
        filename: str = "app.py",
        row: int = 1,
        code: str = "F401",
        message: str = "`os` imported but unused",
        column: int = 1,
    ) -> Issue:
        return Issue(
            filename=filename,
            code=code,
            message=message,
            location=Location(row=row, column=column),
        )

    return _make


@dataclass
class RecordingReporter:
    """Reporter that records (event, *details) tuples in call order."""

    events: list[tuple[Any, ...]] = field(default_factory=list)
    diffs: list[LineDiff] = field(default_factory=list)
    outcomes: list[FileOutcome] = field(default_factory=list)

    def stage(self, message: str) -> None:
        self.events.append(("stage", message))

    def file_started(self, filename: str, issue_count: int) -> None:
        self.events.append(("file_started", filename, issue_count))

    def fix_started(self, filename: str, issue: Issue) -> None:
        self.events.append(("fix_started", filename, issue.message))

    def fix_applied(self, filename: str, issue: Issue, diff: LineDiff) -> None:
        self.events.append(("fix_applied", filename, issue.message))
        self.diffs.append(diff)

    def fix_failed(self, filename: str, issue: Issue, error: Exception) -> None:
        self.events.append(("fix_failed", filename, issue.message, str(error)))

    def read_failed(self, filename: str, error: Exception) -> None:
        self.events.append(("read_failed", filename))

    def write_failed(self, filename: str, error: Exception) -> None:
        self.events.append(("write_failed", filename))

    def file_completed(self, outcome: FileOutcome) -> None:
        self.events.append(("file_completed", outcome.filename, outcome.state.value))
        self.outcomes.append(outcome)

    def names(self, filename: str | None = None) -> list[str]:
        """Event names, optionally only those of one file."""
        return [
            e[0]
            for e in self.events
            if filename is None or (len(e) > 1 and e[1] == filename)
        ]


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    """Reporter recording every event."""
    return RecordingReporter()


@dataclass
class FixCall:
    """One recorded propose_fix() call."""

    filename: str
    issue: Issue
    content: str


class FakeFixer:
    """Scripted ContentFixer.

    ``respond(issue, content)`` returns the new content, or raises FixError.
    Every call yields to the event loop first so concurrent files interleave.
    """

    def __init__(self, respond: Callable[[Issue, str], str]) -> None:
        self.respond = respond
        self.calls: list[FixCall] = []
        self.in_flight: dict[str, int] = {}
        self.max_in_flight_per_file = 0
        self.max_in_flight_total = 0

    async def propose_fix(self, filename: str, issue: Issue, current_content: str) -> str:
        self.calls.append(FixCall(filename, issue, current_content))
        self.in_flight[filename] = self.in_flight.get(filename, 0) + 1
        self.max_in_flight_per_file = max(self.max_in_flight_per_file, self.in_flight[filename])
        self.max_in_flight_total = max(self.max_in_flight_total, sum(self.in_flight.values()))
        try:
            await asyncio.sleep(0)
            return self.respond(issue, current_content)
        finally:
            self.in_flight[filename] -= 1

    def calls_for(self, filename: str) -> list[FixCall]:
        return [c for c in self.calls if c.filename == filename]


@pytest.fixture
def fake_fixer_factory() -> Callable[[Callable[[Issue, str], str]], FakeFixer]:
    """Return a factory building FakeFixer instances."""
    return FakeFixer


def append_marker(issue: Issue, content: str) -> str:
    """Fixer response appending one marker line per issue."""
    return f"{content}# fixed {issue.code} at {issue.location.row}\n"


def fail_for_code(code: str) -> Callable[[Issue, str], str]:
    """Fixer response that fails for ``code`` and appends a marker otherwise."""

    def _respond(issue: Issue, content: str) -> str:
        if issue.code == code:
            raise FixError("Fix service returned HTTP 500", issue_code=code, status_code=500)
        return append_marker(issue, content)

    return _respond


@pytest.fixture
def marker_response() -> Callable[[Issue, str], str]:
    """Response function appending a marker line per fix."""
    return append_marker


@pytest.fixture
def failing_response() -> Callable[[str], Callable[[Issue, str], str]]:
    """Factory of response functions failing for one issue code."""
    return fail_for_code
