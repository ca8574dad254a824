from __future__ import annotations

from typing import Any, Optional

from prompt_runner import logger as logger_mod

from ._json import parse_json, validate_json
from .base import LLMClient
from .errors import LLMError
from .types import LLMResult, LLMTextResult, Usage

log = logger_mod.get_logger()


class OpenAILLM(LLMClient):
    """OpenAI client wrapper built on the Responses API.

    - Structured Outputs via `text.format` json_schema; `strict` only on request,
      since strict mode rejects schemas without `additionalProperties: false`
      and a complete `required` list
    - Plain text via `instructions` + `input`
    """

    provider = "openai"

    def __init__(self, api_key: str, *, client: Any = None, strict: bool = False):
        if client is None:
            try:
                from openai import AsyncOpenAI  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise LLMError(
                    "openai SDK not installed. Add dependency 'openai'."
                ) from e

            client = AsyncOpenAI(api_key=api_key)

        self._client = client
        self._strict = strict

    def _extract_output_text(self, resp: Any) -> str:
        # Newer SDKs expose output_text
        text = getattr(resp, "output_text", None)
        if isinstance(text, str) and text.strip():
            return text.strip()

        # Fallback: resp.output is a list of items with .content[]
        for item in getattr(resp, "output", []) or []:
            for c in getattr(item, "content", []) or []:
                if getattr(c, "type", None) in ("output_text", "text"):
                    t = getattr(c, "text", None)
                    if isinstance(t, str) and t.strip():
                        return t.strip()

        raise LLMError("Unable to extract text from OpenAI response")

    @staticmethod
    def _usage(resp: Any) -> Usage:
        usage = getattr(resp, "usage", None)
        if usage is None:
            return Usage()
        return Usage(
            input_tokens=getattr(usage, "input_tokens", None),
            output_tokens=getattr(usage, "output_tokens", None),
            total_tokens=getattr(usage, "total_tokens", None),
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
        kwargs: dict[str, Any] = {}
        if system:
            kwargs["instructions"] = system

        resp = await self._client.responses.create(
            model=model,
            input=prompt,
            text={
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "schema": json_schema,
                    "strict": self._strict,
                }
            },
            **kwargs,
        )
        raw = self._extract_output_text(resp)
        data = parse_json(raw)
        validate_json(data, json_schema)
        log.debug(f"OpenAI structured response received for model={model}")
        return LLMResult(
            provider=self.provider,
            model=model,
            output_json=data,
            raw_text=raw,
            usage=self._usage(resp),
        )

    async def generate_text(
        self,
        *,
        model: str,
        prompt: str,
        system: Optional[str] = None,
    ) -> LLMTextResult:
        kwargs: dict[str, Any] = {}
        if system:
            kwargs["instructions"] = system

        resp = await self._client.responses.create(model=model, input=prompt, **kwargs)
        return LLMTextResult(
            provider=self.provider,
            model=model,
            text=self._extract_output_text(resp),
            usage=self._usage(resp),
        )
