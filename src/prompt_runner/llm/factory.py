from __future__ import annotations

from typing import Callable, Union

from .anthropic_client import AnthropicLLM
from .base import LLMClient
from .errors import LLMError
from .google_client import GoogleLLM
from .models import ProviderFamily
from .openai_client import OpenAILLM

ClientFactory = Callable[[str], LLMClient]

CLIENT_FACTORIES: dict[ProviderFamily, ClientFactory] = {
    ProviderFamily.ANTHROPIC: AnthropicLLM,
    ProviderFamily.OPENAI: OpenAILLM,
    ProviderFamily.GOOGLE: GoogleLLM,
}


def build_llm(*, provider: Union[ProviderFamily, str], api_key: str) -> LLMClient:
    """Factory for provider clients.

    Providers:
    - anthropic
    - openai
    - google

    Extend by adding a ProviderFamily member and mapping its client here.
    """

    try:
        family = ProviderFamily(
            provider if isinstance(provider, ProviderFamily) else provider.lower().strip()
        )
    except ValueError:
        raise LLMError(f"Unknown LLM provider: {provider}") from None

    factory = CLIENT_FACTORIES.get(family)
    if factory is None:
        raise LLMError(f"Unknown LLM provider: {provider}")

    if not api_key:
        raise LLMError(f"Missing API key for LLM provider {family.value} (set LLM_API_KEY)")

    return factory(api_key)
