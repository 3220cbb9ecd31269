"""Allow ``python -m ruff_fixer``."""

from ruff_fixer.cli import app

app()
