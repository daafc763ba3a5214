"""Canonical request validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from llm_universal.base.errors import RequestValidationError
from llm_universal.base.models import CanonicalRequest
from llm_universal.base.validation import validate_request


def test_accepts_camel_and_snake_case(chat_data):
    camel = validate_request({**chat_data, "maxTokens": 50, "topP": 0.5})
    snake = validate_request({**chat_data, "max_tokens": 50, "top_p": 0.5})
    assert camel.max_tokens == snake.max_tokens == 50  # nosec B101
    assert camel.top_p == snake.top_p == 0.5  # nosec B101


def test_unknown_fields_are_ignored(chat_data):
    req = validate_request({**chat_data, "internalFlag": True})
    assert "internalFlag" not in req.to_dict()  # nosec B101


def test_existing_request_passes_through(chat_data):
    req = validate_request(chat_data)
    assert validate_request(req) is req  # nosec B101


def test_to_dict_is_idempotent(chat_data):
    req = validate_request({**chat_data, "temperature": 0.0, "stop": ["END"]})
    again = validate_request(req.to_dict())
    assert again == req  # nosec B101
    assert req.to_dict()["temperature"] == 0.0  # nosec B101


def test_collects_every_violation_with_known_provider(chat_data):
    with pytest.raises(RequestValidationError) as ei:
        validate_request({**chat_data, "temperature": 5, "model": None})
    err = ei.value
    fields = {v["field"] for v in err.violations}
    assert err.provider == "openai"  # nosec B101
    assert {"temperature", "model"} <= fields  # nosec B101
    assert all({"field", "message", "type"} <= set(v) for v in err.violations)  # nosec B101
    assert not err.retryable  # nosec B101


def test_unknown_provider_reports_unknown():
    with pytest.raises(RequestValidationError) as ei:
        validate_request({"provider": "nope", "model": "m", "messages": [{"role": "user", "content": "x"}]})
    assert ei.value.provider == "unknown"  # nosec B101
    assert any(v["field"] == "provider" for v in ei.value.violations)  # nosec B101


@pytest.mark.parametrize(
    "patch",
    [
        {"messages": None},
        {"messages": [{"role": "robot", "content": "x"}]},
        {"maxTokens": 0},
        {"maxTokens": 100001},
        {"topP": 1.5},
        {"presencePenalty": -3},
        {"frequencyPenalty": 2.5},
        {"batch": {"enabled": "true"}},
        {"batch": {"enabled": True, "completionWindow": "1h"}},
        {"responseFormat": {"type": "xml"}},
    ],
)
def test_rejects_invalid_fields(chat_data, patch):
    with pytest.raises(RequestValidationError):
        validate_request({**chat_data, **patch})


def test_rejects_non_mapping():
    with pytest.raises(RequestValidationError) as ei:
        validate_request(["not", "a", "mapping"])
    assert ei.value.violations[0]["field"] == "request"  # nosec B101


def test_tools_accept_nested_function_shape(chat_data):
    req = validate_request(
        {
            **chat_data,
            "tools": [{"type": "function", "function": {"name": "lookup", "parameters": {"type": "object"}}}],
        }
    )
    assert req.tools[0].name == "lookup"  # nosec B101


def test_request_is_frozen(chat_data):
    req = validate_request(chat_data)
    with pytest.raises(ValidationError):
        req.model = "other"  # type: ignore[misc]
    assert isinstance(req, CanonicalRequest)  # nosec B101


def test_empty_model_and_messages_pass_through(chat_data):
    req = validate_request({**chat_data, "model": "", "messages": []})
    assert req.model == "" and req.messages == []  # nosec B101
    assert req.to_dict()["messages"] == []  # nosec B101
