from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Usage:
    """Token accounting reported by a provider. Fields are None when unreported."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def to_dict(self) -> dict[str, Optional[int]]:
        return asdict(self)


@dataclass(frozen=True)
class PromptRequest:
    prompt: str
    json_schema: dict[str, Any]
    system_prompt: Optional[str] = None


@dataclass(frozen=True)
class RetryAttempt:
    """One failed self-correcting attempt: the error and the text that caused it."""

    error: str
    response: str


@dataclass(frozen=True)
class LLMTextResult:
    provider: str
    model: str
    text: str
    usage: Usage = field(default_factory=Usage)


@dataclass(frozen=True)
class LLMResult:
    """Provider-neutral result container."""

    provider: str
    model: str
    output_json: dict[str, Any]
    raw_text: str
    usage: Usage = field(default_factory=Usage)
