"""OpenAI-compatible chat adapters.

Most providers accept the OpenAI ``/chat/completions`` body. They differ only
in which optional sampling fields they accept, so one adapter class carries a
per-provider allow-list and everything outside it is omitted.
"""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from ..models import CanonicalRequest
from .base import ProviderAdapter, compact, openai_tools

# Canonical attribute -> wire field.
FIELD_MAP: Dict[str, str] = {
    "max_tokens": "max_tokens",
    "temperature": "temperature",
    "top_p": "top_p",
    "stream": "stream",
    "stop": "stop",
    "presence_penalty": "presence_penalty",
    "frequency_penalty": "frequency_penalty",
    "tools": "tools",
    "response_format": "response_format",
    "seed": "seed",
}

ALL_FIELDS: FrozenSet[str] = frozenset(FIELD_MAP)

SUPPORTED_FIELDS: Dict[str, FrozenSet[str]] = {
    "openai": ALL_FIELDS,
    "gh-models": ALL_FIELDS,
    "together": ALL_FIELDS,
    "qwen": ALL_FIELDS,
    "grok": ALL_FIELDS,
    "groq": ALL_FIELDS,
    "openrouter": ALL_FIELDS,
    "deepseek": ALL_FIELDS - {"seed"},
    "siliconflow": ALL_FIELDS - {"presence_penalty", "seed"},
    "perplexity": frozenset(
        {"max_tokens", "temperature", "top_p", "stream", "presence_penalty", "frequency_penalty"}
    ),
}


class OpenAICompatibleAdapter(ProviderAdapter):
    """Bearer-authenticated adapter emitting the OpenAI chat body."""

    def __init__(
        self,
        provider: str,
        supported_fields: Optional[FrozenSet[str]] = None,
        *,
        batch_protocol: Any = None,
    ) -> None:
        super().__init__(provider, batch_protocol=batch_protocol)
        self.supported_fields = (
            supported_fields if supported_fields is not None else SUPPORTED_FIELDS.get(provider, ALL_FIELDS)
        )

    def _value(self, req: CanonicalRequest, attr: str) -> Any:
        if attr == "tools":
            return openai_tools(req)
        if attr == "response_format":
            return req.response_format.model_dump() if req.response_format else None
        return getattr(req, attr)

    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        body: Dict[str, Any] = {"model": req.model, "messages": req.messages_as_dicts()}
        for attr, wire in FIELD_MAP.items():
            if attr in self.supported_fields:
                body[wire] = self._value(req, attr)
        self.omit(req, sorted(ALL_FIELDS - self.supported_fields))
        return compact(body)


__all__ = ["OpenAICompatibleAdapter", "FIELD_MAP", "SUPPORTED_FIELDS", "ALL_FIELDS"]
