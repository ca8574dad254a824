from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import RetryAttempt


class LLMError(RuntimeError):
    pass


class UnknownModelError(LLMError):
    """The configured model name has no entry in the model registry."""


class LLMValidationError(LLMError):
    """Raised when the model output cannot be validated against the requested schema."""


class JsonParseError(LLMValidationError):
    pass


class SchemaValidationError(LLMValidationError):
    pass


class RetryExhaustedError(LLMError):
    """The self-correcting loop ran out of attempts without a valid response."""

    def __init__(self, message: str, attempts: list[RetryAttempt] | None = None):
        super().__init__(message)
        self.attempts = list(attempts or [])
