from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import UnknownModelError


class ProviderFamily(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


@dataclass(frozen=True)
class ModelEntry:
    name: str
    provider: ProviderFamily
    # False for models that cannot take a response schema (Gemini thinking
    # variants); those go through the self-correcting text loop.
    supports_structured_output: bool = True


LLM_MODELS: tuple[ModelEntry, ...] = (
    # Anthropic
    ModelEntry("claude-3-5-sonnet-20240620", ProviderFamily.ANTHROPIC),
    ModelEntry("claude-3-5-sonnet-20241022", ProviderFamily.ANTHROPIC),
    # OpenAI
    ModelEntry("gpt-4o-mini", ProviderFamily.OPENAI),
    ModelEntry("o1", ProviderFamily.OPENAI),
    ModelEntry("o1-mini", ProviderFamily.OPENAI),
    ModelEntry("o3-mini", ProviderFamily.OPENAI),
    # Google stable models https://ai.google.dev/gemini-api/docs/models/gemini
    ModelEntry("gemini-2.0-flash-001", ProviderFamily.GOOGLE),
    ModelEntry("gemini-2.0-flash-lite-preview-02-05", ProviderFamily.GOOGLE),
    ModelEntry("gemini-1.5-flash", ProviderFamily.GOOGLE),
    ModelEntry("gemini-1.5-flash-8b", ProviderFamily.GOOGLE),
    ModelEntry("gemini-1.5-pro", ProviderFamily.GOOGLE),
    # Google experimental models https://ai.google.dev/gemini-api/docs/models/experimental-models
    ModelEntry("gemini-2.0-pro-exp-02-05", ProviderFamily.GOOGLE),
    # https://ai.google.dev/gemini-api/docs/thinking#limitations
    ModelEntry(
        "gemini-2.0-flash-thinking-exp-01-21",
        ProviderFamily.GOOGLE,
        supports_structured_output=False,
    ),
)


def index_models(models: Iterable[ModelEntry]) -> Mapping[str, ModelEntry]:
    """Build a read-only name -> entry index, rejecting duplicate names."""

    index: dict[str, ModelEntry] = {}
    for entry in models:
        if entry.name in index:
            raise ValueError(f"Duplicate LLM model name: {entry.name}")
        index[entry.name] = entry
    return MappingProxyType(index)


MODELS_BY_NAME = index_models(LLM_MODELS)


def available_models() -> tuple[str, ...]:
    return tuple(m.name for m in LLM_MODELS)


def lookup_model(name: str, models: Iterable[ModelEntry] | None = None) -> ModelEntry:
    """Return the registry entry whose name equals `name` exactly."""

    if models is None:
        entry = MODELS_BY_NAME.get(name)
        known = available_models()
    else:
        candidates = tuple(models)
        entry = next((m for m in candidates if m.name == name), None)
        known = tuple(m.name for m in candidates)

    if entry is None:
        raise UnknownModelError(
            f"Unknown LLM model: {name}. Available models: {', '.join(known)}"
        )
    return entry
