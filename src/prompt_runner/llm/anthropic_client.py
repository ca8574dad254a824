from __future__ import annotations

import json
from typing import Any, Optional

from prompt_runner import logger as logger_mod

from ._json import validate_json
from .base import LLMClient
from .errors import LLMError
from .types import LLMResult, LLMTextResult, Usage

log = logger_mod.get_logger()

DEFAULT_MAX_TOKENS = 4096


class AnthropicLLM(LLMClient):
    """Anthropic Messages API wrapper.

    Structured output is obtained by forcing a single tool call whose
    `input_schema` is the requested JSON Schema; the tool input is the result.
    """

    provider = "anthropic"

    def __init__(
        self,
        api_key: str,
        *,
        client: Any = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        if client is None:
            try:
                from anthropic import AsyncAnthropic  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise LLMError(
                    "anthropic SDK not installed. Add dependency 'anthropic'."
                ) from e

            client = AsyncAnthropic(api_key=api_key)

        self._client = client
        self._max_tokens = max_tokens

    def _request_kwargs(self, model: str, prompt: str, system: Optional[str]) -> dict:
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        return kwargs

    @staticmethod
    def _usage(resp: Any) -> Usage:
        usage = getattr(resp, "usage", None)
        if usage is None:
            return Usage()
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)
        total = None
        if input_tokens is not None and output_tokens is not None:
            total = input_tokens + output_tokens
        return Usage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total,
        )

    async def generate_object(
        self,
        *,
        model: str,
        prompt: str,
        system: Optional[str] = None,
        json_schema: dict[str, Any],
        schema_name: str = "output",
    ) -> LLMResult:
        resp = await self._client.messages.create(
            **self._request_kwargs(model, prompt, system),
            tools=[
                {
                    "name": schema_name,
                    "description": "Respond with an object matching this schema.",
                    "input_schema": json_schema,
                }
            ],
            tool_choice={"type": "tool", "name": schema_name},
        )

        for block in getattr(resp, "content", []) or []:
            if getattr(block, "type", None) == "tool_use":
                data = getattr(block, "input", None)
                validate_json(data, json_schema)
                return LLMResult(
                    provider=self.provider,
                    model=model,
                    output_json=data,
                    raw_text=json.dumps(data, ensure_ascii=False),
                    usage=self._usage(resp),
                )

        log.warning(
            f"Anthropic response had no tool_use block (stop_reason={getattr(resp, 'stop_reason', None)})"
        )
        raise LLMError("Unable to extract tool input from Anthropic response")

    async def generate_text(
        self,
        *,
        model: str,
        prompt: str,
        system: Optional[str] = None,
    ) -> LLMTextResult:
        resp = await self._client.messages.create(
            **self._request_kwargs(model, prompt, system)
        )
        parts = [
            getattr(block, "text", "")
            for block in getattr(resp, "content", []) or []
            if getattr(block, "type", None) == "text"
        ]
        # An empty reply is returned as "" so the caller's JSON parsing reports it.
        text = "".join(parts).strip()
        return LLMTextResult(
            provider=self.provider, model=model, text=text, usage=self._usage(resp)
        )
