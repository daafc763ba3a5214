"""API key sanitization and URL validation."""

from __future__ import annotations

import pytest

from llm_universal.base.errors import ConfigurationError
from llm_universal.base.security import sanitize_api_key, validate_url


def test_control_characters_are_stripped():
    assert sanitize_api_key(" sk-te\r\nst\t ", "openai") == "sk-test"  # nosec B101


@pytest.mark.parametrize("key", ["", "   ", "\r\n\t", "abc"])
def test_empty_or_short_keys_rejected(key):
    with pytest.raises(ConfigurationError) as ei:
        sanitize_api_key(key, "openai")
    assert ei.value.issue == "invalid_api_key"  # nosec B101


def test_explicit_min_length_wins():
    assert sanitize_api_key("abc", "openai", min_length=3) == "abc"  # nosec B101
    with pytest.raises(ConfigurationError):
        sanitize_api_key("sk-test", "openai", min_length=20)


def test_min_length_from_environment(monkeypatch):
    monkeypatch.setenv("LLM_UNIVERSAL_MIN_API_KEY_LENGTH", "12")
    with pytest.raises(ConfigurationError):
        sanitize_api_key("sk-test", "openai")


def test_rejection_event_never_contains_key(events):
    with pytest.raises(ConfigurationError):
        sanitize_api_key("sk1", "openai")
    assert events[-1]["event"] == "security.rejected"  # nosec B101
    assert "sk1" not in str(events[-1])  # nosec B101


@pytest.mark.parametrize(
    "url",
    [
        "ftp://api.openai.com/v1",
        "file:///etc/passwd",
        "http://localhost:8080/x",
        "http://127.0.0.1/x",
        "http://10.1.2.3/x",
        "http://192.168.0.10/x",
        "http://172.16.5.4/x",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]:8000/x",
        "http://[fe80::1]/x",
        "http://[fd00::1]/x",
        "http://[::ffff:127.0.0.1]/x",
        "http://0.0.0.0/x",
        "not a url",
    ],
)
def test_disallowed_urls(url):
    with pytest.raises(ConfigurationError) as ei:
        validate_url(url, "openai")
    assert ei.value.issue == "disallowed_url"  # nosec B101


def test_public_https_allowed():
    url = "https://api.openai.com/v1/chat/completions"
    assert validate_url(url, "openai") == url  # nosec B101


def test_loopback_exception_scoped_to_local_provider():
    assert validate_url("http://localhost:11434/api/chat", "ollama")  # nosec B101
    assert validate_url("http://127.0.0.1:11434/api/chat", "ollama")  # nosec B101
    for provider in ("openai", "huggingface", "gh-models"):
        with pytest.raises(ConfigurationError):
            validate_url("http://localhost:11434/api/chat", provider)


def test_local_provider_still_needs_http_scheme():
    with pytest.raises(ConfigurationError):
        validate_url("ftp://localhost:11434", "ollama")
