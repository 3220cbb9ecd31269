"""ruff-fixer: fix linter findings one issue at a time with a chat completion model."""

__version__ = "0.1.0"
