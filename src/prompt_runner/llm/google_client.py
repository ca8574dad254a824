from __future__ import annotations

from typing import Any, Optional

from prompt_runner import logger as logger_mod

from ._json import parse_json, validate_json
from .base import LLMClient
from .errors import LLMError
from .types import LLMResult, LLMTextResult, Usage

log = logger_mod.get_logger()


class GoogleLLM(LLMClient):
    """Gemini wrapper on the google-genai SDK (async surface: `client.aio`).

    Thinking variants reject `response_json_schema`; the runner only calls
    `generate_text` for those.
    """

    provider = "google"

    def __init__(self, api_key: str, *, client: Any = None):
        try:
            from google.genai import types as genai_types  # type: ignore
        except Exception as e:  # noqa: BLE001
            raise LLMError(
                "google-genai SDK not installed. Add dependency 'google-genai'."
            ) from e

        if client is None:
            from google import genai  # type: ignore

            client = genai.Client(api_key=api_key)

        self._client = client
        self._types = genai_types

    @staticmethod
    def _usage(resp: Any) -> Usage:
        meta = getattr(resp, "usage_metadata", None)
        if meta is None:
            return Usage()
        return Usage(
            input_tokens=getattr(meta, "prompt_token_count", None),
            output_tokens=getattr(meta, "candidates_token_count", None),
            total_tokens=getattr(meta, "total_token_count", None),
        )

    async def _generate(self, model: str, prompt: str, config: Any) -> Any:
        return await self._client.aio.models.generate_content(
            model=model, contents=prompt, config=config
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
        config = self._types.GenerateContentConfig(
            system_instruction=system or None,
            response_mime_type="application/json",
            response_json_schema=json_schema,
        )
        resp = await self._generate(model, prompt, config)

        raw = (getattr(resp, "text", None) or "").strip()
        if not raw:
            raise LLMError("Unable to extract text from Gemini response")
        data = parse_json(raw)
        validate_json(data, json_schema)
        log.debug(f"Gemini structured response received for model={model}")
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
        config = self._types.GenerateContentConfig(system_instruction=system or None)
        resp = await self._generate(model, prompt, config)

        # Blocked or empty candidates surface as text=None; let the caller's
        # JSON parsing report it.
        text = (getattr(resp, "text", None) or "").strip()
        return LLMTextResult(
            provider=self.provider, model=model, text=text, usage=self._usage(resp)
        )
