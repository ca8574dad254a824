from __future__ import annotations

import json
from typing import Any, Optional

from prompt_runner import logger as logger_mod
from prompt_runner.config import LLMConfig, load_config

from ._json import parse_json, validate_json
from .base import LLMClient
from .errors import LLMValidationError, RetryExhaustedError
from .factory import build_llm
from .models import ModelEntry, lookup_model
from .prompts import build_json_system_prompt
from .types import PromptRequest, RetryAttempt, Usage

log = logger_mod.get_logger()

MAX_RETRIES = 5


def _log_usage(config: LLMConfig, usage: Usage) -> None:
    if config.debug:
        log.info(f"usage: \n{json.dumps(usage.to_dict(), indent=2)}")


async def _run_self_correcting(
    request: PromptRequest,
    model: ModelEntry,
    llm: LLMClient,
    config: LLMConfig,
) -> dict[str, Any]:
    """Ask for JSON in plain text, feeding earlier failures back on each retry."""

    retry_count = 0
    previous_errors: list[RetryAttempt] = []

    while retry_count < MAX_RETRIES:
        system = build_json_system_prompt(
            request.system_prompt, request.json_schema, previous_errors
        )
        result = await llm.generate_text(
            model=model.name, prompt=request.prompt, system=system
        )
        _log_usage(config, result.usage)

        try:
            data = parse_json(result.text)
            validate_json(data, request.json_schema)
            return data
        except LLMValidationError as e:
            log.info(f"Failed to parse AI response as JSON: {e}")
            previous_errors.append(RetryAttempt(error=str(e), response=result.text))
            retry_count += 1

    latest = previous_errors[-1].error if previous_errors else None
    raise RetryExhaustedError(
        f"Failed to parse AI response as JSON after {MAX_RETRIES} attempts. "
        f"Latest error: {latest}",
        attempts=previous_errors,
    )


async def _run_structured(
    request: PromptRequest,
    model: ModelEntry,
    llm: LLMClient,
    config: LLMConfig,
) -> dict[str, Any]:
    result = await llm.generate_object(
        model=model.name,
        prompt=request.prompt,
        system=request.system_prompt,
        json_schema=request.json_schema,
    )
    _log_usage(config, result.usage)
    return result.output_json


async def run_prompt(
    prompt: str,
    json_schema: dict[str, Any],
    system_prompt: Optional[str] = None,
    *,
    config: Optional[LLMConfig] = None,
) -> dict[str, Any]:
    """Run one prompt against the configured model and return a schema-valid object.

    Raises:
        UnknownModelError: the configured model is not in the registry.
        RetryExhaustedError: a model without structured output never produced
            valid JSON within MAX_RETRIES attempts.
        LLMError: missing credentials or an unusable provider response.
    """

    config = config or load_config()
    model = lookup_model(config.model)
    llm = build_llm(provider=model.provider, api_key=config.api_key)
    request = PromptRequest(
        prompt=prompt, json_schema=json_schema, system_prompt=system_prompt
    )

    log.debug(
        f"Running prompt with model={model.name} provider={model.provider.value} "
        f"structured={model.supports_structured_output}"
    )
    if not model.supports_structured_output:
        return await _run_self_correcting(request, model, llm, config)
    return await _run_structured(request, model, llm, config)
