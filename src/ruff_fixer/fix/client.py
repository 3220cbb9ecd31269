"""Chat completion client that proposes fixed file content.

One request per issue: the prompt carries the issue message, the line the
issue's row points to in the *current* content, and the whole current
content. The response's ``choices[0].message.content`` is returned verbatim
as the new file content; whether it actually fixes anything is the service's
business.

Example:
    >>> import httpx
    >>> from ruff_fixer.core.config import FixServiceConfig
    >>> async with httpx.AsyncClient() as http:
    ...     client = FixClient(http, api_key="sk-...", config=FixServiceConfig())
    ...     new_content = await client.propose_fix("app.py", issue, content)

"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ruff_fixer.core.config import FixServiceConfig
from ruff_fixer.core.exceptions import FixError
from ruff_fixer.linter.models import Issue
from ruff_fixer.reporting.diff import split_lines

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Fix the following issue in the Python code:\n\n"
    "Issue description:\n{message}\n\n"
    "Problematic line:\n{line}\n\n"
    "Here's the current content of the file:\n\n{content}\n\n"
    "Please provide only the entire fixed content of the file addressing the issue "
    "listed above, do not provide any explanation, do not wrap the response with backticks."
)


def issue_line(content: str, row: int) -> str:
    """Return the 1-indexed line ``row`` of ``content``.

    Rows come from the original scan and are not adjusted after earlier
    fixes, so they may point past the end of the current content; that
    yields an empty line instead of an error.
    """
    if row < 1:
        return ""
    lines = split_lines(content)
    if row > len(lines):
        return ""
    return lines[row - 1]


def build_prompt(issue: Issue, current_content: str) -> str:
    """Build the user prompt for one issue against the current content."""
    return PROMPT_TEMPLATE.format(
        message=issue.message,
        line=issue_line(current_content, issue.location.row),
        content=current_content,
    )


def build_request_body(issue: Issue, current_content: str, config: FixServiceConfig) -> dict[str, Any]:
    """Build the chat completion JSON body."""
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": config.system_prompt},
            {"role": "user", "content": build_prompt(issue, current_content)},
        ],
    }


def extract_content(data: Any) -> str:
    """Extract ``choices[0].message.content`` from a response body.

    Raises:
        ValueError: If the field is missing or not a string.

    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError("Failed to parse response content") from e
    if not isinstance(content, str):
        raise ValueError("Failed to parse response content")
    return content


class FixClient:
    """Propose fixed file content for one issue at a time.

    Holds no per-request state, so one instance (and its underlying
    httpx.AsyncClient) is shared by all concurrent file tasks. Nothing is
    retried: every failure becomes a FixError for that one issue.

    Attributes:
        config: Endpoint settings.

    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, config: FixServiceConfig) -> None:
        """Initialize the client.

        Args:
            http: Shared async HTTP client.
            api_key: Bearer token.
            config: Endpoint settings.

        """
        self._http = http
        self._api_key = api_key
        self.config = config

    def __repr__(self) -> str:
        """Return string representation with the API key masked."""
        key = self._api_key
        masked = f"{key[:3]}***" if len(key) > 8 else ("***" if key else "(not configured)")
        return f"FixClient(url={self.config.completions_url!r}, model={self.config.model!r}, api_key={masked})"

    async def propose_fix(self, filename: str, issue: Issue, current_content: str) -> str:
        """Ask the service for the fixed content of ``filename``.

        Args:
            filename: File being fixed (for error context).
            issue: The issue to address.
            current_content: Content as of the previous successful fix.

        Returns:
            Raw replacement content from the service.

        Raises:
            FixError: On transport failure, non-2xx status or an unusable body.

        """
        body = build_request_body(issue, current_content, self.config)

        try:
            response = await self._http.post(
                self.config.completions_url,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self.config.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise FixError(
                f"Fix request timed out after {self.config.timeout_seconds}s",
                filename=filename,
                issue_code=issue.code,
            ) from e
        except httpx.HTTPError as e:
            raise FixError(
                f"Fix request failed: {type(e).__name__}: {e}",
                filename=filename,
                issue_code=issue.code,
            ) from e

        if not 200 <= response.status_code < 300:
            logger.debug(
                "Fix service error: status=%s, response=%s",
                response.status_code,
                response.text[:500],
            )
            raise FixError(
                f"Fix service returned HTTP {response.status_code}",
                filename=filename,
                issue_code=issue.code,
                status_code=response.status_code,
            )

        try:
            content = extract_content(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            raise FixError(
                f"Invalid fix service response: {e}",
                filename=filename,
                issue_code=issue.code,
                status_code=response.status_code,
            ) from e

        logger.debug(
            "Fix received for %s (%s): %d -> %d chars",
            filename,
            issue.code or "no code",
            len(current_content),
            len(content),
        )
        return content
