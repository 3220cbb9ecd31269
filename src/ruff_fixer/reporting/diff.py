"""Line-positional diff between two content snapshots.

Lines are compared by index, not aligned: an inserted line shows up as a
change on every following position. Empty lines are never printed, so a
line that became blank only shows its removal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ORIGINAL_HEADER = "--- Original"
FIXED_HEADER = "+++ Fixed"


class DiffKind(str, Enum):
    """Kind of a changed line."""

    REMOVED = "removed"
    ADDED = "added"


@dataclass(frozen=True)
class DiffLine:
    """One changed line.

    Attributes:
        kind: REMOVED (from the original) or ADDED (in the fixed content).
        text: Line text without the trailing newline.
        position: 0-based line index both snapshots were compared at.

    """

    kind: DiffKind
    text: str
    position: int

    def render(self) -> str:
        """Return the line with its ``- `` / ``+ `` prefix."""
        prefix = "-" if self.kind is DiffKind.REMOVED else "+"
        return f"{prefix} {self.text}"


@dataclass
class LineDiff:
    """All changed lines between two snapshots, in position order."""

    lines: list[DiffLine] = field(default_factory=list)

    @property
    def removed(self) -> list[str]:
        """Texts of removed lines."""
        return [line.text for line in self.lines if line.kind is DiffKind.REMOVED]

    @property
    def added(self) -> list[str]:
        """Texts of added lines."""
        return [line.text for line in self.lines if line.kind is DiffKind.ADDED]

    @property
    def is_empty(self) -> bool:
        """True if no line changed."""
        return not self.lines


def split_lines(content: str) -> list[str]:
    """Split content into lines the way the linter numbers rows.

    Only ``\\n`` and ``\\r\\n`` end a line; form feeds and other characters
    that ``str.splitlines()`` treats as breaks stay inside the line. A
    trailing newline does not produce an extra empty line.
    """
    pieces = content.split("\n")
    last = pieces.pop()
    lines = [piece[:-1] if piece.endswith("\r") else piece for piece in pieces]
    if last:
        lines.append(last)
    return lines


def compute_line_diff(original: str, fixed: str) -> LineDiff:
    """Compare two contents line by line.

    Args:
        original: Content before the fix.
        fixed: Content after the fix.

    Returns:
        LineDiff with a removed and/or added entry per differing position.

    """
    original_lines = split_lines(original)
    fixed_lines = split_lines(fixed)

    diff = LineDiff()
    for i in range(max(len(original_lines), len(fixed_lines))):
        original_line = original_lines[i] if i < len(original_lines) else ""
        fixed_line = fixed_lines[i] if i < len(fixed_lines) else ""
        if original_line == fixed_line:
            continue
        if original_line:
            diff.lines.append(DiffLine(DiffKind.REMOVED, original_line, i))
        if fixed_line:
            diff.lines.append(DiffLine(DiffKind.ADDED, fixed_line, i))
    return diff


def render_diff(diff: LineDiff) -> list[str]:
    """Render a diff with ``--- Original`` / ``+++ Fixed`` headers."""
    return [ORIGINAL_HEADER, FIXED_HEADER, *(line.render() for line in diff.lines)]
