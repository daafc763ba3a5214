"""Header, URL and payload translation per provider family."""

from __future__ import annotations

import pytest

from llm_universal.base.adapters import ADAPTERS, get_adapter, register_adapter
from llm_universal.base.adapters.openai_compatible import OpenAICompatibleAdapter
from llm_universal.base.assembler import create_request
from llm_universal.base.errors import ConfigurationError
from llm_universal.config.defaults import PROVIDERS

FORBIDDEN_KEYS = {"provider", "apiKey", "api_key", "batch"}

_KEYS = {"ollama": None, "gh-models": None, "huggingface": None}


def _data(provider, **extra):
    data = {
        "provider": provider,
        "model": "some-model",
        "messages": [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
        ],
        "maxTokens": 64,
        "temperature": 0.2,
        "topP": 0.9,
        "stop": "END",
        "seed": 7,
        "presencePenalty": 0.1,
        "frequencyPenalty": 0.1,
    }
    key = _KEYS.get(provider, "sk-test-key")
    if key:
        data["apiKey"] = key
    data.update(extra)
    return data


def _walk_keys(obj):
    if isinstance(obj, dict):
        for k, v in obj.items():
            yield k
            yield from _walk_keys(v)
    elif isinstance(obj, list):
        for item in obj:
            yield from _walk_keys(item)


def test_every_provider_has_an_adapter():
    assert set(ADAPTERS) == set(PROVIDERS)  # nosec B101


@pytest.mark.parametrize("provider", PROVIDERS)
def test_payload_never_leaks_internal_fields(provider):
    desc = create_request(_data(provider))
    assert FORBIDDEN_KEYS.isdisjoint(set(_walk_keys(desc.body)))  # nosec B101
    assert desc.headers["Content-Type"] == "application/json"  # nosec B101
    assert list(desc.headers)[0] == "Content-Type"  # nosec B101


def test_openai_headers_and_snake_case_body():
    desc = create_request(_data("openai", responseFormat={"type": "json_object"}))
    assert desc.headers["Authorization"] == "Bearer sk-test-key"  # nosec B101
    assert desc.url == "https://api.openai.com/v1/chat/completions"  # nosec B101
    body = desc.body
    assert body["max_tokens"] == 64  # nosec B101
    assert body["top_p"] == 0.9  # nosec B101
    assert body["presence_penalty"] == 0.1  # nosec B101
    assert body["response_format"] == {"type": "json_object"}  # nosec B101
    assert body["messages"][0] == {"role": "system", "content": "Be brief."}  # nosec B101


def test_openai_tools_use_function_wrapper():
    desc = create_request(_data("openai", tools=[{"name": "lookup", "description": "Find"}]))
    assert desc.body["tools"] == [  # nosec B101
        {"type": "function", "function": {"name": "lookup", "description": "Find"}}
    ]


def test_allow_list_omits_unsupported_fields(events):
    desc = create_request(_data("perplexity", tools=[{"name": "lookup"}]))
    assert "seed" not in desc.body and "tools" not in desc.body and "stop" not in desc.body  # nosec B101
    assert desc.body["presence_penalty"] == 0.1  # nosec B101
    omitted = [e for e in events if e["event"] == "payload.field_omitted"]
    assert omitted and "seed" in omitted[-1]["fields"]  # nosec B101


def test_anthropic_headers_have_no_authorization():
    desc = create_request(_data("anthropic"))
    assert desc.headers["x-api-key"] == "sk-test-key"  # nosec B101
    assert desc.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    assert "Authorization" not in desc.headers  # nosec B101
    assert "anthropic-beta" not in desc.headers  # nosec B101


def test_anthropic_body_hoists_system_and_maps_stop():
    body = create_request(_data("anthropic", tools=[{"name": "lookup"}])).body
    assert body["system"] == "Be brief."  # nosec B101
    assert body["messages"] == [{"role": "user", "content": "Hi"}]  # nosec B101
    assert body["stop_sequences"] == ["END"]  # nosec B101
    assert body["tools"][0]["input_schema"]["type"] == "object"  # nosec B101
    assert "seed" not in body and "presence_penalty" not in body  # nosec B101


def test_anthropic_max_tokens_defaults():
    data = _data("anthropic")
    del data["maxTokens"]
    assert create_request(data).body["max_tokens"] == 1024  # nosec B101


def test_google_uses_native_body_and_model_url():
    desc = create_request(_data("google", model="gemini-1.5-pro"))
    assert desc.url.endswith("/v1beta/models/gemini-1.5-pro:generateContent")  # nosec B101
    body = desc.body
    assert body["contents"] == [{"role": "user", "parts": [{"text": "Hi"}]}]  # nosec B101
    assert body["systemInstruction"] == {"parts": [{"text": "Be brief."}]}  # nosec B101
    assert body["generationConfig"]["maxOutputTokens"] == 64  # nosec B101
    assert body["generationConfig"]["stopSequences"] == ["END"]  # nosec B101
    assert "model" not in body  # nosec B101


def test_huggingface_embeds_model_in_url_and_key_is_optional():
    desc = create_request(_data("huggingface", model="gpt2"))
    assert desc.url == "https://api-inference.huggingface.co/models/gpt2"  # nosec B101
    assert "Authorization" not in desc.headers  # nosec B101
    assert desc.body["inputs"].endswith("assistant:")  # nosec B101
    assert desc.body["parameters"]["max_new_tokens"] == 64  # nosec B101


def test_optional_key_sent_as_bearer_when_present():
    desc = create_request(_data("gh-models", apiKey="ghp-token"))
    assert desc.headers["Authorization"] == "Bearer ghp-token"  # nosec B101


def test_ollama_is_unauthenticated_and_local():
    desc = create_request(_data("ollama", apiKey="ignored-key"))
    assert desc.url == "http://localhost:11434/api/chat"  # nosec B101
    assert set(desc.headers) == {"Content-Type"}  # nosec B101
    assert desc.body["stream"] is False  # nosec B101
    assert desc.body["options"]["num_predict"] == 64  # nosec B101


def test_key_sanitization_runs_for_unauthenticated_provider():
    with pytest.raises(ConfigurationError) as ei:
        create_request(_data("ollama", apiKey="x"))
    assert ei.value.issue == "invalid_api_key"  # nosec B101


@pytest.mark.parametrize("provider", ["openai", "anthropic", "groq", "openrouter"])
def test_missing_key_for_key_required_provider(provider):
    data = _data(provider)
    del data["apiKey"]
    with pytest.raises(ConfigurationError) as ei:
        create_request(data)
    assert ei.value.issue == "missing_api_key"  # nosec B101


def test_key_with_injection_characters_is_cleaned():
    desc = create_request(_data("openai", apiKey="sk-test\r\nX-Evil: 1"))
    assert "\n" not in desc.headers["Authorization"]  # nosec B101
    assert desc.headers["Authorization"] == "Bearer sk-testX-Evil: 1"  # nosec B101


def test_unknown_provider_lookup():
    with pytest.raises(ConfigurationError) as ei:
        get_adapter("fireworks")
    assert ei.value.issue == "unsupported_provider"  # nosec B101


def test_register_adapter_replaces_entry():
    original = ADAPTERS["deepseek"]
    try:
        register_adapter(OpenAICompatibleAdapter("deepseek", frozenset({"max_tokens"})))
        body = create_request(_data("deepseek")).body
        assert set(body) == {"model", "messages", "max_tokens"}  # nosec B101
    finally:
        register_adapter(original)
