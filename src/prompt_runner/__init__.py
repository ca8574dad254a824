"""Run prompts against hosted LLMs and get back schema-validated JSON."""

from .llm import run_prompt

__all__ = ["run_prompt"]
