"""Shared CLI utilities for ruff-fixer.

This module contains exit codes, the console singleton, logging setup and
message helpers used by the CLI.
"""

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

# Exit codes following Unix conventions
EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1  # Linter failure or unexpected error
EXIT_CONFIG_ERROR: int = 2  # Configuration/usage error
EXIT_SIGINT: int = 130  # 128 + SIGINT (2) - Interrupted by Ctrl+C

# When stdout is piped, Rich automatically strips ANSI codes
_is_tty = sys.stdout.isatty()

console = Console(force_terminal=_is_tty, no_color=not _is_tty)

# Failure output, kept apart from progress so stdout can be piped
_is_err_tty = sys.stderr.isatty()
err_console = Console(stderr=True, force_terminal=_is_err_tty, no_color=not _is_err_tty)

logger = logging.getLogger(__name__)


def _error(message: str) -> None:
    """Display error message with red styling."""
    console.print(f"[red]Error:[/red] {message}")


def _info(message: str) -> None:
    """Display info message with blue styling."""
    console.print(f"[blue]Info:[/blue] {message}")


def _success(message: str) -> None:
    """Display success message with green styling."""
    console.print(f"[green]✓[/green] {message}")


def _warning(message: str) -> None:
    """Display warning message with yellow styling."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags.

    Args:
        verbose: If True, set DEBUG level.
        quiet: If True, set ERROR level.

    Note:
        If both are True, verbose takes precedence. Default level is WARNING;
        progress and diffs go through the reporter, not the log.
        RUFF_FIXER_LOG_LEVEL env var overrides the level.

    """
    env_level = os.environ.get("RUFF_FIXER_LOG_LEVEL", "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = getattr(logging, env_level)
    elif verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    # Clear any existing handlers to avoid duplicates
    logging.root.handlers.clear()

    # basicConfig doesn't set the handler level
    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )

    # HTTP client loggers can expose request headers (bearer token)
    for logger_name in ("httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _validate_root_folder(root: str) -> Path:
    """Validate and resolve the folder to remediate.

    Args:
        root: Path to the root folder.

    Returns:
        Resolved absolute Path.

    Raises:
        typer.Exit: If path doesn't exist or isn't a directory.

    """
    root_path = Path(root).resolve()

    if not root_path.exists():
        _error(f"Root folder not found: {root}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    if not root_path.is_dir():
        _error(f"Root folder must be a directory, got file: {root}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    return root_path
