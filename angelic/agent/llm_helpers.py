"""Shared LLM utilities: overload retry, fence stripping and JSON parsing.

- _strip_json_fences: Remove markdown code fences from LLM output
- _parse_json_response: Parse JSON from LLM response after stripping fences
- _parse_json_object: Same, but the top-level value must be an object
- _invoke_with_retry: Retry messages.create() on Claude 529 OverloadedError
"""

import json
from typing import Any

import structlog
from anthropic._exceptions import OverloadedError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)


def _strip_json_fences(content: str) -> str:
    """Remove markdown code fences wrapping JSON output."""
    content = content.strip()
    if content.startswith("```"):
        first_newline = content.find("\n")
        if first_newline != -1:
            content = content[first_newline + 1 :]
        if content.endswith("```"):
            content = content[:-3].rstrip()
    return content


def _parse_json_response(content: str) -> dict | list:
    """Parse JSON from LLM response, stripping fences first."""
    return json.loads(_strip_json_fences(content))


def _parse_json_object(content: str) -> dict:
    """Parse a JSON object from LLM output.

    Raises:
        ValueError: If the text is not JSON (json.JSONDecodeError is a ValueError)
            or the top-level value is not an object.
    """
    parsed = _parse_json_response(content)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


@retry(
    retry=retry_if_exception_type(OverloadedError),
    stop=stop_after_attempt(4),
    wait=wait_exponential(multiplier=2, min=2, max=30),
    reraise=True,
    before_sleep=lambda rs: logger.warning(
        "claude_overloaded_retrying",
        attempt=rs.attempt_number,
        sleep_seconds=rs.next_action.sleep,
    ),
)
async def _invoke_with_retry(
    client: Any,
    model: str,
    system: str,
    messages: list[dict],
    max_tokens: int = 1024,
    temperature: float = 0.3,
) -> str:
    """Invoke Anthropic messages.create() with retry on Claude 529 overload.

    Retries up to 3 times with exponential backoff (2s, 4s, 8s max 30s).
    Only retries OverloadedError (529). All other exceptions propagate immediately.

    Returns:
        Concatenated text of the response's text blocks
    """
    response = await client.messages.create(
        model=model,
        system=system,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return "".join(block.text for block in response.content if getattr(block, "type", "text") == "text")
