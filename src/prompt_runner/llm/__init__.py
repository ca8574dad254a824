"""LLM provider abstractions (Anthropic / OpenAI / Gemini).

Design goals:
- Keep provider-specific SDKs isolated.
- Provide a small, stable interface for "prompt -> structured JSON" use cases.
- Validate output against a JSON Schema for deterministic downstream use.
"""

from .errors import (
    JsonParseError,
    LLMError,
    LLMValidationError,
    RetryExhaustedError,
    SchemaValidationError,
    UnknownModelError,
)
from .factory import build_llm
from .models import LLM_MODELS, ModelEntry, ProviderFamily, available_models, lookup_model
from .runner import MAX_RETRIES, run_prompt
from .types import LLMResult, LLMTextResult, PromptRequest, RetryAttempt, Usage

__all__ = [
    "JsonParseError",
    "LLMError",
    "LLMResult",
    "LLMTextResult",
    "LLMValidationError",
    "LLM_MODELS",
    "MAX_RETRIES",
    "ModelEntry",
    "PromptRequest",
    "ProviderFamily",
    "RetryAttempt",
    "RetryExhaustedError",
    "SchemaValidationError",
    "UnknownModelError",
    "Usage",
    "available_models",
    "build_llm",
    "lookup_model",
    "run_prompt",
]
