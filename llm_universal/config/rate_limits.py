"""Static rate-limit baseline tables.

Tier baselines per provider. Values mix published documentation with
estimates of uncertain freshness; treat them as defaults that callers replace
via :func:`llm_universal.base.rate_limits.load_rate_limit_table` rather than as
authoritative limits. ``None`` (or a missing key) means the dimension is
unconstrained for that tier. A mapping value holds per-model limits keyed by
model-name prefix.
"""

from __future__ import annotations

from typing import Any, Dict

RPM = "requests_per_minute"
TPM = "tokens_per_minute"
RPD = "requests_per_day"
TPD = "tokens_per_day"

RATE_LIMITS_VERSION = "2025-05"

PROVIDER_RATE_LIMITS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "openai": {
        "free_trial": {RPM: 3, TPM: 10000, RPD: 200},
        "tier1": {RPM: 500, TPM: 30000},
        "tier2": {RPM: 3500, TPM: 180000},
        "tier3": {RPM: 5000, TPM: 300000},
        "tier4": {RPM: 7000, TPM: 600000},
        "tier5": {
            RPM: 10000,
            TPM: {"gpt-4o": 12000000, "gpt-4-turbo": 2000000, "gpt-4": 300000},
        },
    },
    "anthropic": {
        "claude3": {
            RPM: 5,
            TPM: {
                "claude-3-opus": 10000,
                "claude-3-sonnet": 20000,
                "claude-3-haiku": 25000,
                "claude-3.5-sonnet": 20000,
            },
            TPD: 300000,
        },
        "enterprise": {RPM: 50, TPM: 100000, TPD: 3000000},
    },
    "google": {
        "preview": {RPM: 15, TPM: 250000, RPD: 1500},
        "tier1": {RPM: 2000, TPM: 4000000, RPD: None},
        "tier2": {RPM: 10000, TPM: 4000000, RPD: None},
    },
    "groq": {
        "free": {RPM: 30, TPM: 6000, RPD: 14400},
        "paid": {RPM: 6000, TPM: 600000, RPD: 14400},
    },
    "together": {
        "free": {RPM: 60, TPM: 60000},
        "tier1": {RPM: 600, TPM: 180000},
        "tier2": {RPM: 1800, TPM: 250000},
        "tier3": {RPM: 3000, TPM: 500000},
    },
    "openrouter": {
        "free": {RPM: 20, RPD: 50},
        "paid": {RPM: None, RPD: 1000},
    },
    "gh-models": {
        "free": {RPM: 60, RPD: None},
        "authenticated": {RPM: 5000, RPD: None},
    },
    "huggingface": {
        "free": {RPM: 1000, TPM: 100000},
        "pro": {RPM: 10000, TPM: 1000000},
    },
    "deepseek": {
        "free": {RPM: 60, TPM: 60000, RPD: 1000},
        "paid": {RPM: 1000, TPM: 500000, RPD: 10000},
    },
    "qwen": {
        "free": {RPM: 60, TPM: 60000, RPD: 1000},
        "paid": {RPM: 1000, TPM: 500000, RPD: 10000},
    },
    "siliconflow": {
        "free": {RPM: 60, TPM: 60000, RPD: 1000},
        "paid": {RPM: 1000, TPM: 500000, RPD: 10000},
    },
    "grok": {
        "free": {RPM: 10, TPM: 10000, RPD: 100},
        "paid": {RPM: 1000, TPM: 500000, RPD: 10000},
    },
    "perplexity": {
        "standard": {RPM: 2000},
    },
    "ollama": {
        "local": {RPM: None, TPM: None, RPD: None},
    },
}

RATE_LIMIT_DOCUMENTATION: Dict[str, str] = {
    "openai": "https://platform.openai.com/docs/guides/rate-limits",
    "anthropic": "https://docs.anthropic.com/en/api/rate-limits",
    "google": "https://ai.google.dev/gemini-api/docs/quota",
    "groq": "https://console.groq.com/docs/rate-limits",
    "together": "https://docs.together.ai/docs/rate-limits",
    "openrouter": "https://openrouter.ai/docs/limits",
    "gh-models": "https://docs.github.com/en/rest/using-the-rest-api/rate-limits-for-the-rest-api",
    "huggingface": "https://huggingface.co/docs/api-inference/en/rate-limits",
    "deepseek": "https://platform.deepseek.com/api-docs",
    "qwen": "https://help.aliyun.com/zh/dashscope/developer-reference/api-details",
    "siliconflow": "https://siliconflow.cn/zh-cn/siliconcloud",
    "grok": "https://docs.x.ai/api",
    "perplexity": "https://docs.perplexity.ai/guides/rate-limits",
    "ollama": "https://github.com/ollama/ollama/blob/main/docs/api.md",
}

# Response headers each provider uses to report rate-limit state, keyed by the
# field name reported by ``parse_rate_limit_headers``.
_OPENAI_STYLE_HEADERS: Dict[str, str] = {
    "requests_remaining": "x-ratelimit-remaining-requests",
    "requests_limit": "x-ratelimit-limit-requests",
    "tokens_remaining": "x-ratelimit-remaining-tokens",
    "tokens_limit": "x-ratelimit-limit-tokens",
    "reset": "x-ratelimit-reset-requests",
    "retry_after": "retry-after",
}
_GENERIC_HEADERS: Dict[str, str] = {
    "remaining": "x-ratelimit-remaining",
    "limit": "x-ratelimit-limit",
    "reset": "x-ratelimit-reset",
}

RATE_LIMIT_HEADERS: Dict[str, Dict[str, str]] = {
    "openai": _OPENAI_STYLE_HEADERS,
    "groq": _OPENAI_STYLE_HEADERS,
    "anthropic": {
        "requests_remaining": "anthropic-ratelimit-requests-remaining",
        "tokens_remaining": "anthropic-ratelimit-tokens-remaining",
        "retry_after": "retry-after",
    },
    "together": _GENERIC_HEADERS,
    "openrouter": _GENERIC_HEADERS,
    "gh-models": _GENERIC_HEADERS,
}

__all__ = [
    "RPM",
    "TPM",
    "RPD",
    "TPD",
    "RATE_LIMITS_VERSION",
    "PROVIDER_RATE_LIMITS",
    "RATE_LIMIT_DOCUMENTATION",
    "RATE_LIMIT_HEADERS",
]
