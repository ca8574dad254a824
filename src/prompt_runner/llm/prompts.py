from __future__ import annotations

from typing import Any, Optional, Sequence

from ._json import describe_schema
from .types import RetryAttempt


def format_previous_attempts(previous_errors: Sequence[RetryAttempt]) -> str:
    blocks = [
        f"\nAttempt {i}:\nError: {attempt.error}\nResponse: {attempt.response}\n"
        for i, attempt in enumerate(previous_errors, start=1)
    ]
    return (
        "\n\nPrevious attempts failed with the following errors:\n"
        + "\n".join(blocks)
        + "\n\nPlease fix these issues and ensure the response is valid JSON."
    )


def build_json_system_prompt(
    system_prompt: Optional[str],
    json_schema: dict[str, Any],
    previous_errors: Sequence[RetryAttempt] = (),
) -> str:
    """System prompt for models that must be talked into emitting JSON.

    The caller's instructions come first, then the schema, then (on retries)
    every earlier failure so the model can correct itself.
    """

    prompt = (
        f"{system_prompt or ''}\n"
        "Please format your response as a valid JSON object matching this schema:\n"
        f"{describe_schema(json_schema)}\n"
        "\n"
        "IMPORTANT: Your response must be a single, valid JSON object that matches "
        "the schema exactly."
    )
    if previous_errors:
        prompt += format_previous_attempts(previous_errors)
    return prompt
