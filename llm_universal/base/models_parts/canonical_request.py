"""
Canonical request DTO.

The provider-agnostic description of one LLM call. Adapters read from it to
build provider payloads; nothing downstream mutates it.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field, StrictBool

from .message import CanonicalModel, Message, ResponseFormat, ToolSpec

ProviderName = Literal[
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
]

CompletionWindow = Literal["24h", "48h", "7d"]


class BatchRequestSpec(CanonicalModel):
    """One individually addressable sub-request inside a batch."""

    custom_id: str = Field(min_length=1)
    model: str
    messages: List[Message]
    max_tokens: Optional[int] = Field(default=None, ge=1, le=100000)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    top_p: Optional[float] = Field(default=None, ge=0, le=1)


class BatchConfig(CanonicalModel):
    """Batch submission settings; ``enabled=True`` switches to batch mode.

    ``input_file_id`` is required by file-reference providers. ``metadata``,
    ``batch_size`` and ``timeout`` are honoured only where the provider
    supports them.
    """

    enabled: StrictBool
    custom_id: Optional[str] = None
    completion_window: Optional[CompletionWindow] = None
    requests: Optional[List[BatchRequestSpec]] = None
    input_file_id: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None
    batch_size: Optional[int] = Field(default=None, ge=1)
    timeout: Optional[int] = Field(default=None, ge=1)


class CanonicalRequest(CanonicalModel):
    """Validated, immutable canonical request.

    Attributes:
        provider: One of the supported provider identifiers.
        api_key: Optional secret; required by most providers.
        model: Provider-specific model identifier.
        messages: Ordered conversation.
        max_tokens, temperature, top_p, presence_penalty, frequency_penalty,
        stop, stream, seed: Optional sampling parameters, each range-checked
            on its own.
        tools: Optional function-call declarations.
        response_format: Optional ``text``/``json_object`` hint.
        batch: Optional batch configuration.
    """

    provider: ProviderName
    api_key: Optional[str] = None
    model: str
    messages: List[Message]
    max_tokens: Optional[int] = Field(default=None, ge=1, le=100000)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    top_p: Optional[float] = Field(default=None, ge=0, le=1)
    presence_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    stop: Optional[Union[str, List[str]]] = None
    stream: Optional[bool] = None
    seed: Optional[int] = None
    tools: Optional[List[ToolSpec]] = None
    response_format: Optional[ResponseFormat] = None
    batch: Optional[BatchConfig] = None

    @property
    def is_batch(self) -> bool:
        return bool(self.batch and self.batch.enabled)

    def messages_as_dicts(self) -> List[Dict[str, str]]:
        """Return messages as plain ``{role, content}`` dicts in order."""
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def stop_list(self) -> Optional[List[str]]:
        if self.stop is None:
            return None
        return [self.stop] if isinstance(self.stop, str) else list(self.stop)

    def to_dict(self) -> Dict[str, Any]:
        """Return accepted fields in caller (camelCase) form, ``None`` dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "ProviderName",
    "CompletionWindow",
    "BatchRequestSpec",
    "BatchConfig",
    "CanonicalRequest",
]
