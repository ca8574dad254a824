from __future__ import annotations

from typing import Any, Optional, Protocol

from .types import LLMResult, LLMTextResult


class LLMClient(Protocol):
    """Small interface shared by every provider wrapper.

    One instance is built per `run_prompt` call and discarded afterwards.
    """

    async def generate_object(
        self,
        *,
        model: str,
        prompt: str,
        system: Optional[str] = None,
        json_schema: dict[str, Any],
        schema_name: str = "output",
    ) -> LLMResult:
        raise NotImplementedError

    async def generate_text(
        self,
        *,
        model: str,
        prompt: str,
        system: Optional[str] = None,
    ) -> LLMTextResult:
        raise NotImplementedError
