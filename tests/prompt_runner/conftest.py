import pytest

from prompt_runner.config import LLMConfig
from prompt_runner.llm.types import LLMResult, LLMTextResult, Usage

STRUCTURED_MODEL = "gpt-4o-mini"


class FakeLLM:
    """LLMClient stand-in that replays canned responses and records calls."""

    def __init__(self, texts=(), objects=(), usage=None):
        self.texts = list(texts)
        self.objects = list(objects)
        self.usage = usage or Usage(input_tokens=3, output_tokens=5, total_tokens=8)
        self.text_calls: list[dict] = []
        self.object_calls: list[dict] = []

    async def generate_text(self, *, model, prompt, system=None):
        self.text_calls.append({"model": model, "prompt": prompt, "system": system})
        item = self.texts.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMTextResult(provider="fake", model=model, text=item, usage=self.usage)

    async def generate_object(
        self, *, model, prompt, system=None, json_schema, schema_name="output"
    ):
        self.object_calls.append(
            {
                "model": model,
                "prompt": prompt,
                "system": system,
                "json_schema": json_schema,
            }
        )
        item = self.objects.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResult(
            provider="fake",
            model=model,
            output_json=item,
            raw_text=str(item),
            usage=self.usage,
        )


@pytest.fixture
def fake_llm():
    """Fixture: factory for FakeLLM instances."""

    def _factory(**kwargs) -> FakeLLM:
        return FakeLLM(**kwargs)

    return _factory


@pytest.fixture
def x_schema():
    return {
        "type": "object",
        "properties": {"x": {"type": "number"}},
        "required": ["x"],
    }


@pytest.fixture
def make_config():
    def _factory(model: str = STRUCTURED_MODEL, *, api_key="sk-test", debug=False):
        return LLMConfig(model=model, api_key=api_key, debug=debug)

    return _factory


@pytest.fixture
def install_fake_llm(monkeypatch):
    """Route every provider family to a single FakeLLM; returns the fake and build log."""

    from prompt_runner.llm import factory
    from prompt_runner.llm.models import ProviderFamily

    def _install(fake: FakeLLM):
        built: list[str] = []

        def _build(api_key):
            built.append(api_key)
            return fake

        for family in ProviderFamily:
            monkeypatch.setitem(factory.CLIENT_FACTORIES, family, _build)
        return built

    return _install
