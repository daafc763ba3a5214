"""Hugging Face Inference API (text-generation task) adapter."""
from __future__ import annotations

from typing import Any, Dict

from ..models import CanonicalRequest
from .base import ProviderAdapter, compact


def render_prompt(req: CanonicalRequest) -> str:
    """Flatten the conversation into one prompt string.

    A lone user turn is sent verbatim; longer conversations become a
    ``role: content`` transcript ending with an open ``assistant:`` turn.
    """
    if len(req.messages) == 1 and req.messages[0].role == "user":
        return req.messages[0].content
    lines = [f"{m.role}: {m.content}" for m in req.messages]
    lines.append("assistant:")
    return "\n".join(lines)


class HuggingFaceAdapter(ProviderAdapter):
    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        parameters = compact(
            {
                "max_new_tokens": req.max_tokens,
                "temperature": req.temperature,
                "top_p": req.top_p,
                "stop": req.stop_list(),
                "seed": req.seed,
            }
        )
        self.omit(req, ["presence_penalty", "frequency_penalty", "tools", "response_format"])
        return compact(
            {
                "inputs": render_prompt(req),
                "parameters": parameters or None,
                "stream": req.stream,
            }
        )


__all__ = ["HuggingFaceAdapter", "render_prompt"]
