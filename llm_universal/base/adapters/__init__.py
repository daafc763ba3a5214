"""Provider payload adapters and their registry."""

from .anthropic import AnthropicAdapter
from .base import BEARER, NO_AUTH, X_API_KEY, ProviderAdapter
from .batch import FileReferenceBatch, HybridBatch, InlineBatch, build_batch_jsonl
from .google import GoogleAdapter
from .huggingface import HuggingFaceAdapter
from .ollama import OllamaAdapter
from .openai_compatible import SUPPORTED_FIELDS, OpenAICompatibleAdapter
from .registry import ADAPTERS, batch_providers, get_adapter, register_adapter, supported_providers

__all__ = [
    "ProviderAdapter",
    "BEARER",
    "X_API_KEY",
    "NO_AUTH",
    "OpenAICompatibleAdapter",
    "SUPPORTED_FIELDS",
    "AnthropicAdapter",
    "GoogleAdapter",
    "HuggingFaceAdapter",
    "OllamaAdapter",
    "FileReferenceBatch",
    "InlineBatch",
    "HybridBatch",
    "build_batch_jsonl",
    "ADAPTERS",
    "get_adapter",
    "register_adapter",
    "supported_providers",
    "batch_providers",
]
