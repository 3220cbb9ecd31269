"""Tests for the linter gateway: format, check exit codes and JSON parsing."""

import json
import subprocess
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ruff_fixer.core.exceptions import LinterOutputError, ToolError
from ruff_fixer.linter.gateway import LinterGateway, parse_issues
from ruff_fixer.linter.models import CheckStatus

RUFF_OUTPUT = [
    {
        "cell": None,
        "code": "F401",
        "end_location": {"column": 10, "row": 1},
        "filename": "/project/foo.py",
        "fix": None,
        "location": {"column": 8, "row": 1},
        "message": "`os` imported but unused",
        "noqa_row": 1,
        "url": "https://docs.astral.sh/ruff/rules/unused-import",
    },
    {
        "code": "E741",
        "filename": "/project/bar.py",
        "location": {"column": 1, "row": 3},
        "message": "Ambiguous variable name: `l`",
    },
]


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> Mock:
    result = Mock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestFormat:
    def test_runs_format_command(self, tmp_path: Path) -> None:
        gateway = LinterGateway("/usr/bin/ruff")
        with patch("subprocess.run", return_value=_completed(0)) as mock_run:
            gateway.format(tmp_path)

        args = mock_run.call_args.args[0]
        assert args == ["/usr/bin/ruff", "format", str(tmp_path)]

    def test_nonzero_exit_raises_tool_error(self, tmp_path: Path) -> None:
        gateway = LinterGateway()
        with patch("subprocess.run", return_value=_completed(2, "out", "boom")):
            with pytest.raises(ToolError) as exc_info:
                gateway.format(tmp_path)

        assert exc_info.value.exit_code == 2
        assert exc_info.value.stderr == "boom"
        assert exc_info.value.stdout == "out"
        assert "boom" in str(exc_info.value)

    def test_missing_executable_raises_tool_error(self, tmp_path: Path) -> None:
        gateway = LinterGateway("/nonexistent/ruff")
        with patch("subprocess.run", side_effect=FileNotFoundError("nope")):
            with pytest.raises(ToolError, match="not found"):
                gateway.format(tmp_path)

    def test_timeout_raises_tool_error(self, tmp_path: Path) -> None:
        gateway = LinterGateway(timeout=1.0)
        with patch(
            "subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="ruff", timeout=1.0),
        ):
            with pytest.raises(ToolError, match="timed out"):
                gateway.format(tmp_path)


class TestCheck:
    def test_runs_check_with_fix_and_json_output(self, tmp_path: Path) -> None:
        gateway = LinterGateway("ruff")
        with patch("subprocess.run", return_value=_completed(0)) as mock_run:
            gateway.check(tmp_path)

        args = mock_run.call_args.args[0]
        assert args == ["ruff", "check", "--fix", str(tmp_path), "--output-format", "json"]

    def test_exit_zero_is_clean(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(0, "[]")):
            outcome = LinterGateway().check(tmp_path)

        assert outcome.status is CheckStatus.CLEAN
        assert outcome.issues == []

    def test_exit_one_parses_issues_in_order(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(1, json.dumps(RUFF_OUTPUT))):
            outcome = LinterGateway().check(tmp_path)

        assert outcome.status is CheckStatus.ISSUES
        assert [i.code for i in outcome.issues] == ["F401", "E741"]
        assert outcome.issues[0].filename == "/project/foo.py"
        assert outcome.issues[1].location.row == 3

    def test_other_exit_code_is_tool_failure(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(2, "partial", "error: bad config")):
            outcome = LinterGateway().check(tmp_path)

        assert outcome.status is CheckStatus.TOOL_FAILURE
        assert outcome.exit_code == 2
        assert outcome.stderr == "error: bad config"
        assert outcome.stdout == "partial"
        assert outcome.issues == []

    def test_malformed_payload_is_fatal(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(1, "not json")):
            with pytest.raises(LinterOutputError):
                LinterGateway().check(tmp_path)

    def test_linter_output_error_is_tool_error(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(1, "{}")):
            with pytest.raises(ToolError):
                LinterGateway().check(tmp_path)

    def test_decodes_output_leniently(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(0)) as mock_run:
            LinterGateway().check(tmp_path)

        kwargs = mock_run.call_args.kwargs
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script as the linter")
class TestNonUtf8Output:
    """A stray non-UTF-8 byte in linter output must not crash the gateway."""

    def _fake_linter(self, tmp_path: Path, body: str) -> str:
        script = tmp_path / "fake-ruff"
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(0o755)
        return str(script)

    def test_tool_failure_with_invalid_byte_in_stderr(self, tmp_path: Path) -> None:
        linter = self._fake_linter(tmp_path, "printf 'bad path \\377' >&2\nexit 2")

        outcome = LinterGateway(linter).check(tmp_path)

        assert outcome.status is CheckStatus.TOOL_FAILURE
        assert outcome.exit_code == 2
        assert outcome.stderr == "bad path \ufffd"

    def test_issues_parsed_despite_invalid_byte_in_stderr(self, tmp_path: Path) -> None:
        linter = self._fake_linter(
            tmp_path, "printf '[]'\nprintf 'warning: \\377.py' >&2\nexit 1"
        )

        outcome = LinterGateway(linter).check(tmp_path)

        assert outcome.status is CheckStatus.ISSUES
        assert outcome.issues == []

    def test_format_failure_with_invalid_byte_is_tool_error(self, tmp_path: Path) -> None:
        linter = self._fake_linter(tmp_path, "printf '\\377' >&2\nexit 2")

        with pytest.raises(ToolError) as exc_info:
            LinterGateway(linter).format(tmp_path)

        assert exc_info.value.exit_code == 2


class TestParseIssues:
    def test_empty_array(self) -> None:
        assert parse_issues("[]") == []

    def test_ignores_extra_fields(self) -> None:
        issues = parse_issues(json.dumps(RUFF_OUTPUT[:1]))
        assert issues[0].message == "`os` imported but unused"
        assert issues[0].location.column == 8

    def test_null_code_becomes_empty(self) -> None:
        payload = [
            {
                "code": None,
                "filename": "x.py",
                "location": {"row": 2, "column": 5},
                "message": "SyntaxError: Expected an expression",
            }
        ]
        assert parse_issues(json.dumps(payload))[0].code == ""

    def test_non_array_rejected(self) -> None:
        with pytest.raises(LinterOutputError, match="must be an array"):
            parse_issues('{"filename": "x.py"}')

    def test_entry_missing_location_rejected(self) -> None:
        payload = [{"code": "F401", "filename": "x.py", "message": "unused"}]
        with pytest.raises(LinterOutputError, match="index 0"):
            parse_issues(json.dumps(payload))

    def test_invalid_json_keeps_payload(self) -> None:
        with pytest.raises(LinterOutputError) as exc_info:
            parse_issues("[{")
        assert exc_info.value.stdout == "[{"
