import asyncio
import logging

import pytest

from prompt_runner.llm import runner
from prompt_runner.llm.errors import (
    LLMError,
    RetryExhaustedError,
    UnknownModelError,
)

THINKING_MODEL = "gemini-2.0-flash-thinking-exp-01-21"


def _run(config, schema, prompt="Summarize the diff", system_prompt=None):
    return asyncio.run(
        runner.run_prompt(prompt, schema, system_prompt, config=config)
    )


def test_unknown_model_fails_before_building_a_client(
    make_config, fake_llm, install_fake_llm, x_schema
):
    built = install_fake_llm(fake_llm())

    with pytest.raises(UnknownModelError) as exc:
        _run(make_config("not-a-model"), x_schema)

    assert "not-a-model" in str(exc.value)
    assert built == []


def test_missing_api_key_is_fatal(make_config, fake_llm, install_fake_llm, x_schema):
    fake = fake_llm(objects=[{"x": 1}])
    install_fake_llm(fake)

    with pytest.raises(LLMError):
        _run(make_config(api_key=""), x_schema)
    assert fake.object_calls == []


def test_structured_model_makes_exactly_one_call(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(objects=[{"x": 42}])
    built = install_fake_llm(fake)

    result = _run(make_config("gpt-4o-mini"), x_schema, system_prompt="Be terse")

    assert result == {"x": 42}
    assert built == ["sk-test"]
    assert len(fake.object_calls) == 1
    assert fake.text_calls == []
    call = fake.object_calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["system"] == "Be terse"
    assert call["json_schema"] is x_schema


def test_structured_call_errors_propagate_without_retry(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(objects=[ConnectionError("network down"), {"x": 1}])
    install_fake_llm(fake)

    with pytest.raises(ConnectionError):
        _run(make_config("claude-3-5-sonnet-20241022"), x_schema)
    assert len(fake.object_calls) == 1


def test_thinking_model_first_valid_response_makes_one_call(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=['{"x": 1}'])
    install_fake_llm(fake)

    result = _run(make_config(THINKING_MODEL), x_schema, system_prompt="You review code.")

    assert result == {"x": 1}
    assert len(fake.text_calls) == 1
    assert fake.object_calls == []
    system = fake.text_calls[0]["system"]
    assert system.startswith("You review code.\n")
    assert "Previous attempts failed" not in system


def test_thinking_model_recovers_after_bad_json(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=["{bad}", '{"x":1}'])
    install_fake_llm(fake)

    result = _run(make_config(THINKING_MODEL), x_schema)

    assert result == {"x": 1}
    assert len(fake.text_calls) == 2
    second = fake.text_calls[1]["system"]
    assert second.count("Attempt ") == 1
    assert "Attempt 1:\nError: Failed to parse JSON" in second
    assert "Response: {bad}" in second


def test_thinking_model_feeds_back_every_prior_failure_in_order(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(
        texts=[
            "nope",
            '{"x": "one"}',
            '{"y": 2}',
            '```json\n{"x": 3}\n```',
            '{"x": 4}',
        ]
    )
    install_fake_llm(fake)

    result = _run(make_config(THINKING_MODEL), x_schema)

    assert result == {"x": 4}
    assert len(fake.text_calls) == 5
    final = fake.text_calls[-1]["system"]
    assert final.count("\nAttempt ") == 4
    first = final.index("Attempt 1:\nError: Failed to parse JSON")
    second = final.index("Attempt 2:\nError: JSON schema validation failed at 'x'")
    third = final.index("Attempt 3:\nError: JSON schema validation failed")
    fourth = final.index("Attempt 4:\nError: Failed to parse JSON")
    assert first < second < third < fourth
    assert "Response: nope" in final
    assert 'Response: {"x": "one"}' in final
    assert "'x' is a required property" in final
    assert 'Response: ```json\n{"x": 3}\n```' in final


def test_thinking_model_retries_fenced_json(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=['```json\n{"x": 1}\n```', '{"x": 2}'])
    install_fake_llm(fake)

    result = _run(make_config(THINKING_MODEL), x_schema)

    assert result == {"x": 2}
    assert len(fake.text_calls) == 2
    second = fake.text_calls[1]["system"]
    assert second.count("\nAttempt ") == 1
    assert "Attempt 1:\nError: Failed to parse JSON" in second


def test_thinking_model_gives_up_after_five_attempts(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=["not json"] * 6)
    install_fake_llm(fake)

    with pytest.raises(RetryExhaustedError) as exc:
        _run(make_config(THINKING_MODEL), x_schema)

    assert len(fake.text_calls) == runner.MAX_RETRIES == 5
    assert len(fake.texts) == 1
    assert "after 5 attempts" in str(exc.value)
    assert "Failed to parse JSON" in str(exc.value)
    assert len(exc.value.attempts) == 5
    assert all(a.response == "not json" for a in exc.value.attempts)


def test_exhausted_error_reports_the_last_attempt(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=["a", "b", "c", "d", '{"x": "five"}'])
    install_fake_llm(fake)

    with pytest.raises(RetryExhaustedError) as exc:
        _run(make_config(THINKING_MODEL), x_schema)

    assert "Latest error: JSON schema validation failed" in str(exc.value)
    assert exc.value.attempts[-1].response == '{"x": "five"}'


def test_thinking_model_does_not_retry_provider_errors(
    make_config, fake_llm, install_fake_llm, x_schema
):
    fake = fake_llm(texts=["{bad}", TimeoutError("slow"), '{"x": 1}'])
    install_fake_llm(fake)

    with pytest.raises(TimeoutError):
        _run(make_config(THINKING_MODEL), x_schema)
    assert len(fake.text_calls) == 2


def test_usage_is_logged_only_in_debug(
    make_config, fake_llm, install_fake_llm, x_schema, caplog
):
    caplog.set_level(logging.INFO, logger="prompt_runner")

    install_fake_llm(fake_llm(objects=[{"x": 1}]))
    _run(make_config(debug=False), x_schema)
    assert not any("usage:" in r.getMessage() for r in caplog.records)

    install_fake_llm(fake_llm(objects=[{"x": 1}]))
    _run(make_config(debug=True), x_schema)
    messages = [r.getMessage() for r in caplog.records if "usage:" in r.getMessage()]
    assert len(messages) == 1
    assert '"total_tokens": 8' in messages[0]


def test_run_prompt_reads_environment_when_no_config(
    monkeypatch, fake_llm, install_fake_llm, x_schema
):
    monkeypatch.setenv("LLM_MODEL", "o3-mini")
    monkeypatch.setenv("LLM_API_KEY", "sk-env")
    fake = fake_llm(objects=[{"x": 7}])
    built = install_fake_llm(fake)

    result = asyncio.run(runner.run_prompt("hi", x_schema))

    assert result == {"x": 7}
    assert built == ["sk-env"]
    assert fake.object_calls[0]["model"] == "o3-mini"
