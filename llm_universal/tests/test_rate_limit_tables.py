"""Header parsing, tier recommendation and table loading."""

from __future__ import annotations

import json

import pytest

from llm_universal.base.errors import ConfigurationError
from llm_universal.base.rate_limits import (
    RateLimitTracker,
    load_rate_limit_table,
    parse_rate_limit_headers,
    provider_documentation,
    recommended_tier,
)
from llm_universal.config.rate_limits import PROVIDER_RATE_LIMITS, RATE_LIMIT_HEADERS, RPM, TPM


def test_parse_openai_headers_case_insensitive():
    info = parse_rate_limit_headers(
        {
            "X-RateLimit-Remaining-Requests": "59",
            "x-ratelimit-limit-requests": "60",
            "x-ratelimit-reset-requests": "1s",
            "Retry-After": "2",
        },
        "openai",
    )
    assert info == {"requests_remaining": 59, "requests_limit": 60, "reset": "1s", "retry_after": 2.0}  # nosec B101


def test_parse_anthropic_and_unknown():
    info = parse_rate_limit_headers({"anthropic-ratelimit-tokens-remaining": "900"}, "anthropic")
    assert info == {"tokens_remaining": 900}  # nosec B101
    assert parse_rate_limit_headers({"x-ratelimit-remaining": "1"}, "ollama") == {}  # nosec B101


def test_recommended_tier():
    assert recommended_tier("openai", {"rpm": 4000}) == "tier3"  # nosec B101
    assert recommended_tier("openai", {}) == "free_trial"  # nosec B101
    assert recommended_tier("groq", {"rpm": 10**9}) == "paid"  # nosec B101
    assert recommended_tier("mystery", {"rpm": 1}) == "unknown"  # nosec B101


def test_provider_documentation():
    assert provider_documentation("openai").startswith("https://")  # nosec B101
    assert provider_documentation("mystery") is None  # nosec B101


def test_load_yaml_table_with_short_keys(tmp_path):
    path = tmp_path / "limits.yaml"
    path.write_text("openai:\n  custom:\n    rpm: 2\n    tpm: null\n", encoding="utf-8")
    table = load_rate_limit_table(str(path))
    assert table == {"openai": {"custom": {RPM: 2, TPM: None}}}  # nosec B101
    tracker = RateLimitTracker(table)
    assert tracker.tier_limits("openai", "custom")[RPM] == 2  # nosec B101


def test_load_json_table(tmp_path):
    path = tmp_path / "limits.json"
    path.write_text(json.dumps({"groq": {"free": {"requests_per_minute": 5}}}), encoding="utf-8")
    assert load_rate_limit_table(str(path))["groq"]["free"][RPM] == 5  # nosec B101


@pytest.mark.parametrize("content", ["[1, 2]", '{"openai": 3}', '{"openai": {"t": 4}}', "{not json"])
def test_load_rejects_bad_tables(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError) as ei:
        load_rate_limit_table(str(path))
    assert ei.value.issue == "invalid_rate_limit_table"  # nosec B101


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_rate_limit_table(str(tmp_path / "absent.yaml"))


def test_tracker_accepts_loaded_table(tmp_path):
    path = tmp_path / "limits.yml"
    path.write_text("openai:\n  mine:\n    rpm: 1\n", encoding="utf-8")
    tracker = RateLimitTracker(load_rate_limit_table(str(path)))
    assert list(tracker.limits) == ["openai"]  # nosec B101
    tracker.record("openai")
    assert not tracker.check("openai", "mine").allowed  # nosec B101


def test_tracker_defaults_to_baseline_table():
    assert RateLimitTracker().limits is PROVIDER_RATE_LIMITS  # nosec B101


@pytest.mark.parametrize("provider", sorted(RATE_LIMIT_HEADERS))
def test_every_listed_header_is_parsed(provider):
    table = RATE_LIMIT_HEADERS[provider]
    info = parse_rate_limit_headers({name.upper(): "5" for name in table.values()}, provider)
    assert set(info) == set(table)  # nosec B101
