"""Anthropic Messages API adapter.

Differences from the OpenAI shape: ``x-api-key`` plus a pinned
``anthropic-version`` header, system turns hoisted into the top-level
``system`` field, a mandatory ``max_tokens`` and ``stop_sequences``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_BATCH_BETA, DEFAULT_ANTHROPIC_MAX_TOKENS
from ..models import CanonicalRequest, Message
from .base import X_API_KEY, ProviderAdapter, compact

_EMPTY_SCHEMA = {"type": "object", "properties": {}}


def split_system(messages: Sequence[Message]) -> Tuple[Optional[str], List[Dict[str, str]]]:
    """Separate system turns from the conversation.

    System contents are joined with blank lines; ``tool`` turns are sent as
    ``user`` since the Messages API has no tool role for plain text.
    """
    system = [m.content for m in messages if m.role == "system"]
    turns = [
        {"role": "user" if m.role == "tool" else m.role, "content": m.content}
        for m in messages
        if m.role != "system"
    ]
    return ("\n\n".join(system) if system else None), turns


class AnthropicAdapter(ProviderAdapter):
    auth_scheme = X_API_KEY

    def extra_headers(self, req: CanonicalRequest, mode: str) -> Dict[str, str]:
        headers = {"anthropic-version": ANTHROPIC_API_VERSION}
        if mode == "batch":
            headers["anthropic-beta"] = ANTHROPIC_BATCH_BETA
        return headers

    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        system, turns = split_system(req.messages)
        tools = None
        if req.tools:
            tools = [
                compact(
                    {
                        "name": t.name,
                        "description": t.description,
                        "input_schema": t.parameters or dict(_EMPTY_SCHEMA),
                    }
                )
                for t in req.tools
            ]
        self.omit(req, ["presence_penalty", "frequency_penalty", "seed", "response_format"])
        return compact(
            {
                "model": req.model,
                "max_tokens": req.max_tokens or DEFAULT_ANTHROPIC_MAX_TOKENS,
                "system": system,
                "messages": turns,
                "temperature": req.temperature,
                "top_p": req.top_p,
                "stop_sequences": req.stop_list(),
                "stream": req.stream,
                "tools": tools,
            }
        )


__all__ = ["AnthropicAdapter", "split_system"]
