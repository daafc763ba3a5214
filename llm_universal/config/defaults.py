"""llm_universal.config.defaults
=============================

Central place for small, stable default values used across the
``llm_universal`` package. These defaults can be overridden via environment
variables (see :mod:`llm_universal.config.settings`) or constructor arguments,
but provide sensible fallbacks for local development and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Providers ----

# Closed set of provider identifiers accepted by the canonical schema.
PROVIDERS = (
    "openai",
    "anthropic",
    "google",
    "gh-models",
    "huggingface",
    "together",
    "perplexity",
    "deepseek",
    "qwen",
    "siliconflow",
    "grok",
    "groq",
    "openrouter",
    "ollama",
)

# Providers rejected up front when no API key is supplied.
API_KEY_REQUIRED = frozenset(
    {
        "openai",
        "anthropic",
        "google",
        "together",
        "perplexity",
        "deepseek",
        "qwen",
        "siliconflow",
        "grok",
        "groq",
        "openrouter",
    }
)

# The only provider allowed to resolve to a loopback/private address.
LOCAL_PROVIDER = "ollama"

# ---- Anthropic API revision headers ----
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_BATCH_BETA = "message-batches-2024-09-24"

# ---- Security ----
DEFAULT_MIN_API_KEY_LENGTH = 6

# ---- Timeouts (seconds) ----
DEFAULT_PROVIDER_TIMEOUTS = {
    "openai": 30.0,
    "anthropic": 45.0,
    "google": 35.0,
    "gh-models": 40.0,
    "huggingface": 60.0,  # free tier cold-starts models
    "together": 35.0,
    "perplexity": 30.0,
    "deepseek": 40.0,
    "qwen": 40.0,
    "siliconflow": 35.0,
    "grok": 30.0,
    "groq": 25.0,
    "openrouter": 35.0,
    "ollama": 10.0,
}
DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_TIMEOUT_SECONDS = 120.0

# ---- Retry policy ----
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 10.0
DEFAULT_RETRY_MULTIPLIER = 2.0
DEFAULT_RETRY_JITTER = 0.25

# ---- HTTP ----
MAX_REDIRECTS = 3

# ---- Payload defaults ----
DEFAULT_ANTHROPIC_MAX_TOKENS = 1024
DEFAULT_COMPLETION_WINDOW = "24h"
DEFAULT_TOGETHER_BATCH_SIZE = 10
DEFAULT_TOGETHER_BATCH_TIMEOUT = 300
DEFAULT_TOGETHER_MAX_TOKENS = 1024

__all__ = [
    "PROVIDERS",
    "API_KEY_REQUIRED",
    "LOCAL_PROVIDER",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_BATCH_BETA",
    "DEFAULT_MIN_API_KEY_LENGTH",
    "DEFAULT_PROVIDER_TIMEOUTS",
    "DEFAULT_TIMEOUT_SECONDS",
    "MAX_TIMEOUT_SECONDS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_BASE_DELAY",
    "DEFAULT_RETRY_MAX_DELAY",
    "DEFAULT_RETRY_MULTIPLIER",
    "DEFAULT_RETRY_JITTER",
    "MAX_REDIRECTS",
    "DEFAULT_ANTHROPIC_MAX_TOKENS",
    "DEFAULT_COMPLETION_WINDOW",
    "DEFAULT_TOGETHER_BATCH_SIZE",
    "DEFAULT_TOGETHER_BATCH_TIMEOUT",
    "DEFAULT_TOGETHER_MAX_TOKENS",
]
