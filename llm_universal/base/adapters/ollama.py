"""Ollama local ``/api/chat`` adapter (no auth)."""
from __future__ import annotations

from typing import Any, Dict

from ..models import CanonicalRequest
from .base import NO_AUTH, ProviderAdapter, compact, openai_tools


class OllamaAdapter(ProviderAdapter):
    auth_scheme = NO_AUTH

    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        options = compact(
            {
                "num_predict": req.max_tokens,
                "temperature": req.temperature,
                "top_p": req.top_p,
                "stop": req.stop_list(),
                "seed": req.seed,
                "presence_penalty": req.presence_penalty,
                "frequency_penalty": req.frequency_penalty,
            }
        )
        fmt = "json" if req.response_format and req.response_format.type == "json_object" else None
        # Ollama streams unless told otherwise.
        return compact(
            {
                "model": req.model,
                "messages": req.messages_as_dicts(),
                "stream": bool(req.stream),
                "options": options or None,
                "format": fmt,
                "tools": openai_tools(req),
            }
        )


__all__ = ["OllamaAdapter"]
