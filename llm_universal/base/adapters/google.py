"""Google Gemini ``generateContent`` adapter.

The model is addressed in the URL, so the body carries only ``contents``,
``systemInstruction``, ``generationConfig`` and ``tools``.
"""
from __future__ import annotations

from typing import Any, Dict

from ..models import CanonicalRequest
from .base import ProviderAdapter, compact


class GoogleAdapter(ProviderAdapter):
    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        system = [m.content for m in req.messages if m.role == "system"]
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in req.messages
            if m.role != "system"
        ]
        mime = None
        if req.response_format is not None:
            mime = "application/json" if req.response_format.type == "json_object" else "text/plain"
        generation = compact(
            {
                "maxOutputTokens": req.max_tokens,
                "temperature": req.temperature,
                "topP": req.top_p,
                "stopSequences": req.stop_list(),
                "presencePenalty": req.presence_penalty,
                "frequencyPenalty": req.frequency_penalty,
                "seed": req.seed,
                "responseMimeType": mime,
            }
        )
        tools = None
        if req.tools:
            tools = [{"functionDeclarations": [t.model_dump(exclude_none=True) for t in req.tools]}]
        # streaming uses a separate endpoint
        self.omit(req, ["stream"])
        return compact(
            {
                "contents": contents,
                "systemInstruction": {"parts": [{"text": "\n\n".join(system)}]} if system else None,
                "generationConfig": generation or None,
                "tools": tools,
            }
        )


__all__ = ["GoogleAdapter"]
