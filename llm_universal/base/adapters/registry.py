"""Adapter registry keyed by provider id.

Replaces switch-on-provider-string dispatch: the assembler asks the registry
for an adapter and never branches on the provider name itself.
"""
from __future__ import annotations

from typing import Dict

from ..errors import ConfigurationError
from .anthropic import AnthropicAdapter
from .base import ProviderAdapter
from .batch import FileReferenceBatch, HybridBatch, InlineBatch
from .google import GoogleAdapter
from .huggingface import HuggingFaceAdapter
from .ollama import OllamaAdapter
from .openai_compatible import OpenAICompatibleAdapter

_ALL_WINDOWS = frozenset({"24h", "48h", "7d"})


def _default_adapters() -> Dict[str, ProviderAdapter]:
    adapters: Dict[str, ProviderAdapter] = {
        "openai": OpenAICompatibleAdapter("openai", batch_protocol=FileReferenceBatch(frozenset({"24h"}))),
        "groq": OpenAICompatibleAdapter("groq", batch_protocol=FileReferenceBatch(_ALL_WINDOWS)),
        "siliconflow": OpenAICompatibleAdapter(
            "siliconflow", batch_protocol=FileReferenceBatch(_ALL_WINDOWS, metadata=False)
        ),
        "together": OpenAICompatibleAdapter("together", batch_protocol=HybridBatch()),
        "anthropic": AnthropicAdapter("anthropic", batch_protocol=InlineBatch()),
        "google": GoogleAdapter("google"),
        "huggingface": HuggingFaceAdapter("huggingface"),
        "ollama": OllamaAdapter("ollama"),
    }
    for name in ("gh-models", "perplexity", "deepseek", "qwen", "grok", "openrouter"):
        adapters[name] = OpenAICompatibleAdapter(name)
    return adapters


ADAPTERS: Dict[str, ProviderAdapter] = _default_adapters()


def get_adapter(provider: str) -> ProviderAdapter:
    """Return the adapter registered for ``provider``.

    Raises:
        ConfigurationError: ``issue="unsupported_provider"``.
    """
    adapter = ADAPTERS.get(provider)
    if adapter is None:
        raise ConfigurationError(provider, "unsupported_provider", f"Unknown provider '{provider}'")
    return adapter


def register_adapter(adapter: ProviderAdapter) -> None:
    """Register (or replace) the adapter for ``adapter.provider``."""
    ADAPTERS[adapter.provider] = adapter


def supported_providers() -> tuple:
    return tuple(ADAPTERS)


def batch_providers() -> tuple:
    return tuple(name for name, a in ADAPTERS.items() if a.supports_batch)


__all__ = ["ADAPTERS", "get_adapter", "register_adapter", "supported_providers", "batch_providers"]
