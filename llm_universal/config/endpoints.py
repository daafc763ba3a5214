"""Static provider endpoint table.

Base URLs and per-mode paths for every supported provider. These values are
data, not behavior: an external collection process may refresh them, bumping
``ENDPOINTS_VERSION``, without touching the request logic.

Paths may contain a ``{model}`` placeholder for providers that address the
model in the URL rather than the body.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

ENDPOINTS_VERSION = "2025-05"

BASE_URLS: Dict[str, str] = {
    "openai": "https://api.openai.com",
    "anthropic": "https://api.anthropic.com",
    "google": "https://generativelanguage.googleapis.com",
    "gh-models": "https://models.inference.ai.azure.com",
    "huggingface": "https://api-inference.huggingface.co/models",
    "together": "https://api.together.xyz",
    "perplexity": "https://api.perplexity.ai",
    "deepseek": "https://api.deepseek.com",
    "qwen": "https://dashscope.aliyuncs.com",
    "siliconflow": "https://api.siliconflow.cn",
    "grok": "https://api.x.ai",
    "groq": "https://api.groq.com",
    "openrouter": "https://openrouter.ai",
    "ollama": "http://localhost:11434",
}

CHAT_ENDPOINTS: Dict[str, str] = {
    "openai": "/v1/chat/completions",
    "anthropic": "/v1/messages",
    "google": "/v1beta/models/{model}:generateContent",
    "gh-models": "/chat/completions",
    "huggingface": "/{model}",
    "together": "/v1/chat/completions",
    "perplexity": "/chat/completions",
    "deepseek": "/chat/completions",
    "qwen": "/compatible-mode/v1/chat/completions",
    "siliconflow": "/v1/chat/completions",
    "grok": "/v1/chat/completions",
    "groq": "/openai/v1/chat/completions",
    "openrouter": "/api/v1/chat/completions",
    "ollama": "/api/chat",
}

MODEL_ENDPOINTS: Dict[str, str] = {
    "openai": "/v1/models",
    "anthropic": "/v1/models",
    "google": "/v1beta/models",
    "gh-models": "/models",
    "huggingface": "",
    "together": "/v1/models",
    "perplexity": "/models",
    "deepseek": "/models",
    "qwen": "/compatible-mode/v1/models",
    "siliconflow": "/v1/models",
    "grok": "/v1/models",
    "groq": "/openai/v1/models",
    "openrouter": "/api/v1/models",
    "ollama": "/api/tags",
}

BATCH_ENDPOINTS: Dict[str, str] = {
    "openai": "/v1/batches",
    "anthropic": "/v1/messages/batches",
    "together": "/v1/batches",
    "groq": "/openai/v1/batches",
    "siliconflow": "/v1/batches",
}

_MODE_TABLES = {
    "chat": CHAT_ENDPOINTS,
    "models": MODEL_ENDPOINTS,
    "batch": BATCH_ENDPOINTS,
}


def endpoint_path(provider: str, mode: str) -> Optional[str]:
    """Return the raw (unformatted) path for ``provider``/``mode`` or ``None``."""
    table = _MODE_TABLES.get(mode)
    if table is None:
        raise LookupError(f"unknown endpoint mode '{mode}'")
    return table.get(provider)


def resolve_endpoint(provider: str, mode: str = "chat", model: Optional[str] = None) -> str:
    """Return the absolute URL for a provider and mode.

    Raises:
        LookupError: When the provider has no base URL or no path for ``mode``,
            or when the path needs a model and none was given.
    """
    base = BASE_URLS.get(provider)
    path = endpoint_path(provider, mode)
    if base is None or path is None:
        raise LookupError(f"no {mode} endpoint configured for provider '{provider}'")
    if "{model}" in path:
        if not model:
            raise LookupError(f"{mode} endpoint for '{provider}' requires a model name")
        path = path.format(model=quote(model, safe="/-_.:"))
    return f"{base}{path}"


__all__ = [
    "ENDPOINTS_VERSION",
    "BASE_URLS",
    "CHAT_ENDPOINTS",
    "MODEL_ENDPOINTS",
    "BATCH_ENDPOINTS",
    "endpoint_path",
    "resolve_endpoint",
]
