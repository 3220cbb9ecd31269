"""Command-line entry point for ruff-fixer.

Usage:
    ruff-fixer API_KEY LINTER_PATH ROOT_FOLDER [options]

The API key may also come from OPENAI_API_KEY or the config file.
"""

import logging
from pathlib import Path

import typer

from ruff_fixer.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SIGINT,
    _error,
    _info,
    _setup_logging,
    _success,
    _validate_root_folder,
    _warning,
    console,
    err_console,
)
from ruff_fixer.core.config import build_config
from ruff_fixer.core.exceptions import ConfigError, ToolError
from ruff_fixer.reporting.console import ConsoleReporter
from ruff_fixer.runner import RunSummary, run_fixer_sync

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="ruff-fixer",
    help="Fix remaining linter issues with a chat completion model, one issue at a time.",
    add_completion=False,
)


def _print_summary(summary: RunSummary, dry_run: bool) -> None:
    """Print the end-of-run summary."""
    if summary.is_clean:
        _success("All good")
        return

    console.print()
    console.print(f"  Issues found: {summary.issues_found}")
    console.print(f"  Files processed: {summary.files_processed}")
    console.print(f"  Fixes applied: {summary.fixes_applied}")
    console.print(f"  Fixes failed: {summary.fixes_failed}")
    if dry_run:
        _info("Dry run: no files were written")
    else:
        console.print(f"  Files written: {summary.files_written}")

    if summary.files_failed or summary.fixes_failed:
        _warning(
            f"{summary.files_failed} file(s) and {summary.fixes_failed} fix(es) failed; "
            "see messages above"
        )
    else:
        _success("Remediation completed")


@app.command()
def main(
    api_key: str | None = typer.Argument(
        None,
        envvar="OPENAI_API_KEY",
        show_envvar=False,
        help="Fix service API key (or OPENAI_API_KEY)",
    ),
    linter_path: str | None = typer.Argument(
        None,
        help="Path to the linter executable (default: ruff)",
    ),
    root_folder: str | None = typer.Argument(
        None,
        help="Root folder to format, check and fix (default: .)",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file; command-line values take precedence",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier (default: gpt-4o-mini)",
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="Chat completion API root URL",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Timeout in seconds for each fix request",
    ),
    max_concurrency: int | None = typer.Option(
        None,
        "--max-concurrency",
        "-j",
        help="Maximum number of files fixed concurrently (default: unbounded)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show diffs without writing fixed files",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
) -> None:
    """Format, check and fix ROOT_FOLDER.

    Runs the linter's formatter and auto-fixer, then sends every remaining
    issue to the fix service, file by file, applying each returned fix.

    Examples:
        ruff-fixer sk-... ruff src
        OPENAI_API_KEY=sk-... ruff-fixer --config ruff-fixer.yaml --dry-run

    """
    _setup_logging(verbose=verbose, quiet=quiet)

    overrides = {
        "api_key": api_key,
        "linter_path": linter_path,
        "root_folder": root_folder,
        "max_concurrency": max_concurrency,
        "dry_run": True if dry_run else None,
        "fix_service": {
            "model": model,
            "base_url": base_url,
            "timeout_seconds": timeout,
        },
    }
    try:
        config = build_config(Path(config_file) if config_file else None, overrides)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    root = _validate_root_folder(str(config.root_folder))
    config = config.model_copy(update={"root_folder": root})

    reporter = ConsoleReporter(console, error_console=err_console)
    try:
        summary = run_fixer_sync(config, reporter=reporter)
    except ToolError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    except KeyboardInterrupt:
        _warning("Interrupted")
        raise typer.Exit(code=EXIT_SIGINT) from None
    except Exception as e:
        _error(f"Remediation failed: {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(code=EXIT_ERROR) from None

    _print_summary(summary, config.dry_run)


if __name__ == "__main__":
    app()
