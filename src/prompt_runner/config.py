import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper()

# Model name must match an entry in prompt_runner.llm.models.LLM_MODELS
LLM_MODEL = os.getenv("LLM_MODEL", "")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")

_FALSY = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class LLMConfig:
    model: str
    api_key: str
    debug: bool = False


def is_debug() -> bool:
    """True when DEBUG is set to anything but an explicit off value.

    Unlike a plain "is the variable non-empty" check, DEBUG=0, false, no and
    off all disable debug output.
    """

    return os.getenv("DEBUG", "").strip().lower() not in _FALSY


def load_config() -> LLMConfig:
    """Read the LLM settings from the environment at call time.

    The module-level constants are snapshots taken at import; this helper
    picks up changes made afterwards (e.g. by the calling action).
    """

    return LLMConfig(
        model=os.getenv("LLM_MODEL", LLM_MODEL).strip(),
        api_key=os.getenv("LLM_API_KEY", LLM_API_KEY).strip(),
        debug=is_debug(),
    )
