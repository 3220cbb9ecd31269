"""Configuration models for ruff-fixer.

This module provides Pydantic models for run configuration:
- FixServiceConfig: Chat completion endpoint settings
- FixerConfig: Root configuration shared by every per-file work unit

Environment variable substitution is supported for the API key via ${VAR}
syntax. Both models are frozen so a single instance can be handed to all
concurrent file tasks without copying.

Example:
    >>> from ruff_fixer.core.config import FixerConfig
    >>> config = FixerConfig(api_key="${OPENAI_API_KEY}", root_folder="src")
    >>> config.fix_service.model
    'gpt-4o-mini'

"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ruff_fixer.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Config files larger than this are rejected before parsing
MAX_CONFIG_SIZE = 1024 * 1024

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_SYSTEM_PROMPT = (
    "You are an automated bot that fixes Python code issues "
    "based on the provided issue report."
)

# Pattern for env var substitution: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _substitute_env_vars(value: str) -> str:
    """Substitute ${VAR} patterns with environment variable values.

    Args:
        value: String potentially containing ${VAR} patterns.

    Returns:
        String with env vars substituted. Missing vars become empty string.

    """

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name, "")
        if not env_value:
            logger.debug("Environment variable %s not set", var_name)
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


class FixServiceConfig(BaseModel):
    """Chat completion endpoint settings.

    Attributes:
        base_url: API root; "/chat/completions" is appended per request.
        model: Model identifier sent with every request.
        timeout_seconds: Per-request timeout. A timed-out request is a
            failed fix for that issue, never retried.
        system_prompt: System message framing the assistant.

    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=1,
        description="Chat completion API root URL",
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        min_length=1,
        description="Model identifier",
    )
    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout for a single fix request in seconds",
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        min_length=1,
        description="System instruction sent before each prompt",
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so endpoint joins never produce '//'."""
        return v.rstrip("/")

    @property
    def completions_url(self) -> str:
        """Return the full chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"


class FixerConfig(BaseModel):
    """Root configuration for a remediation run.

    Attributes:
        api_key: Bearer token for the fix service (${VAR} supported).
        linter_path: Path or name of the linter executable.
        root_folder: Folder the linter formats, checks and fixes.
        dry_run: Report diffs without writing files back.
        max_concurrency: Upper bound on files processed at once.
            None means one task per file with no bound.
        linter_timeout_seconds: Timeout for each linter invocation.
        fix_service: Fix service endpoint settings.

    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(
        default="",
        repr=False,
        description="Fix service API key (${VAR} supported)",
    )
    linter_path: str = Field(
        default="ruff",
        min_length=1,
        description="Linter executable",
    )
    root_folder: Path = Field(
        default=Path("."),
        description="Root folder to format, check and fix",
    )
    dry_run: bool = Field(
        default=False,
        description="Show diffs without writing fixed files",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of files processed concurrently (None = unbounded)",
    )
    linter_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Timeout for each linter invocation in seconds",
    )
    fix_service: FixServiceConfig = Field(
        default_factory=FixServiceConfig,
        description="Fix service settings",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def substitute_env_vars(cls, v: str | None) -> str:
        """Substitute ${VAR} patterns with environment variable values."""
        if v is None:
            return ""
        return _substitute_env_vars(str(v))


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a plain mapping.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping (empty dict for an empty file).

    Raises:
        ConfigError: On file/parse errors or if the root is not a mapping.

    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_CONFIG_SIZE + 1)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if len(content) > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config file {path} exceeds 1MB limit")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")
    return data


def build_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> FixerConfig:
    """Build a validated FixerConfig from an optional file plus overrides.

    Values in ``overrides`` win over the file. ``None`` override values are
    ignored so unset CLI options never mask file settings. A nested
    ``fix_service`` override mapping is merged key by key.

    Args:
        config_path: Optional YAML config file.
        overrides: Explicit values, typically from CLI options.

    Returns:
        Validated, frozen FixerConfig.

    Raises:
        ConfigError: If the file cannot be loaded or validation fails.

    """
    data: dict[str, Any] = load_config_file(config_path) if config_path else {}

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "fix_service" and isinstance(value, dict):
            service = dict(data.get("fix_service") or {})
            service.update({k: v for k, v in value.items() if v is not None})
            data["fix_service"] = service
        else:
            data[key] = value

    try:
        config = FixerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if not config.api_key:
        raise ConfigError("Fix service API key is required (argument, config or OPENAI_API_KEY)")

    logger.debug(
        "Config loaded: linter=%s, root=%s, model=%s, max_concurrency=%s",
        config.linter_path,
        config.root_folder,
        config.fix_service.model,
        config.max_concurrency,
    )
    return config
