"""Batch sub-protocols.

Three families exist:

- **File reference** (openai, groq, siliconflow): the caller uploads a JSONL
  file first and the batch body only references it by ``input_file_id``.
- **Inline** (anthropic): the batch body carries every sub-request.
- **Hybrid** (together): inline sub-requests, or one request synthesized from
  the top-level canonical fields when no array is given.

Fields a family cannot carry are dropped with a ``batch.field_dropped``
warning so nothing silently disappears.
"""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, FrozenSet, Iterable, List

from ...config.defaults import (
    DEFAULT_ANTHROPIC_MAX_TOKENS,
    DEFAULT_COMPLETION_WINDOW,
    DEFAULT_TOGETHER_BATCH_SIZE,
    DEFAULT_TOGETHER_BATCH_TIMEOUT,
    DEFAULT_TOGETHER_MAX_TOKENS,
)
from ..errors import ConfigurationError
from ..logging import get_logger, log_event
from ..models import BatchRequestSpec, CanonicalRequest
from .anthropic import split_system
from .base import compact

_LOG = get_logger("llm_universal.adapters.batch")

# BatchConfig attribute -> caller-facing name used in events.
_BATCH_FIELDS = {
    "custom_id": "customId",
    "completion_window": "completionWindow",
    "requests": "requests",
    "input_file_id": "inputFileId",
    "metadata": "metadata",
    "batch_size": "batchSize",
    "timeout": "timeout",
}


def _drop_unsupported(req: CanonicalRequest, supported: Iterable[str]) -> None:
    batch = req.batch
    keep = set(supported)
    for attr, name in _BATCH_FIELDS.items():
        if attr not in keep and getattr(batch, attr) is not None:
            log_event(
                _LOG,
                "batch.field_dropped",
                level=logging.WARNING,
                provider=req.provider,
                model=req.model,
                field=name,
            )


def _missing(provider: str, field: str) -> ConfigurationError:
    return ConfigurationError(
        provider, "missing_batch_field", f"{provider} batch processing requires {field}"
    )


class FileReferenceBatch:
    """Batch body that points at a previously uploaded JSONL file.

    Args:
        completion_windows: Windows the provider accepts.
        metadata: Whether the provider accepts a ``metadata`` map.
        endpoint: Relative chat path the batch lines target.
    """

    family = "file_reference"

    def __init__(
        self,
        completion_windows: FrozenSet[str] = frozenset({"24h"}),
        *,
        metadata: bool = True,
        endpoint: str = "/v1/chat/completions",
    ) -> None:
        self.completion_windows = completion_windows
        self.metadata = metadata
        self.endpoint = endpoint

    def build(self, adapter: Any, req: CanonicalRequest) -> Dict[str, Any]:
        batch = req.batch
        if not batch.input_file_id:
            raise _missing(req.provider, "input_file_id")
        window = batch.completion_window or DEFAULT_COMPLETION_WINDOW
        if window not in self.completion_windows:
            raise ConfigurationError(
                req.provider,
                "unsupported_completion_window",
                f"{req.provider} batch processing does not accept completion window '{window}' "
                f"(allowed: {', '.join(sorted(self.completion_windows))})",
            )
        supported = ["input_file_id", "completion_window"] + (["metadata"] if self.metadata else [])
        _drop_unsupported(req, supported)
        return compact(
            {
                "input_file_id": batch.input_file_id,
                "endpoint": self.endpoint,
                "completion_window": window,
                "metadata": dict(batch.metadata) if self.metadata and batch.metadata else None,
            }
        )


class InlineBatch:
    """Anthropic Message Batches: explicit ``requests`` with unique ids."""

    family = "inline"

    def _params(self, spec: BatchRequestSpec) -> Dict[str, Any]:
        system, turns = split_system(spec.messages)
        return compact(
            {
                "model": spec.model,
                "max_tokens": spec.max_tokens or DEFAULT_ANTHROPIC_MAX_TOKENS,
                "system": system,
                "messages": turns,
                "temperature": spec.temperature,
                "top_p": spec.top_p,
            }
        )

    def build(self, adapter: Any, req: CanonicalRequest) -> Dict[str, Any]:
        specs = req.batch.requests
        if not specs:
            raise _missing(req.provider, "requests")
        seen = set()
        for spec in specs:
            if spec.custom_id in seen:
                raise ConfigurationError(
                    req.provider,
                    "duplicate_custom_id",
                    f"{req.provider} batch custom_id '{spec.custom_id}' is not unique",
                )
            seen.add(spec.custom_id)
        _drop_unsupported(req, ["requests"])
        return {"requests": [{"custom_id": s.custom_id, "params": self._params(s)} for s in specs]}


class HybridBatch:
    """Together batches: explicit array, or one synthesized from the request."""

    family = "hybrid"

    def _entry(self, spec: BatchRequestSpec) -> Dict[str, Any]:
        return compact(
            {
                "customId": spec.custom_id,
                "model": spec.model,
                "messages": [{"role": m.role, "content": m.content} for m in spec.messages],
                "maxTokens": spec.max_tokens or DEFAULT_TOGETHER_MAX_TOKENS,
                "temperature": spec.temperature,
                "topP": spec.top_p,
            }
        )

    def synthesize(self, req: CanonicalRequest) -> BatchRequestSpec:
        """Build the single sub-request implied by the top-level fields."""
        custom_id = req.batch.custom_id or f"batch-{uuid.uuid4().hex[:12]}"
        log_event(
            _LOG,
            "batch.request_synthesized",
            level=logging.WARNING,
            provider=req.provider,
            model=req.model,
            custom_id=custom_id,
        )
        return BatchRequestSpec(
            custom_id=custom_id,
            model=req.model,
            messages=list(req.messages),
            max_tokens=req.max_tokens,
            temperature=req.temperature,
            top_p=req.top_p,
        )

    def build(self, adapter: Any, req: CanonicalRequest) -> Dict[str, Any]:
        batch = req.batch
        specs: List[BatchRequestSpec] = list(batch.requests) if batch.requests else [self.synthesize(req)]
        supported = ["requests", "batch_size", "timeout"]
        if not batch.requests:
            supported.append("custom_id")
        _drop_unsupported(req, supported)
        return {
            "requests": [self._entry(s) for s in specs],
            "batchSize": batch.batch_size or DEFAULT_TOGETHER_BATCH_SIZE,
            "timeout": batch.timeout or DEFAULT_TOGETHER_BATCH_TIMEOUT,
        }


def build_batch_jsonl(requests: Iterable[Any], provider: str = "openai") -> str:
    """Render the JSONL upload body for a file-reference batch provider.

    Each item may be a :class:`BatchRequestSpec` or a mapping accepted by it.
    One line per sub-request: ``{custom_id, method, url, body}``.

    Raises:
        ConfigurationError: ``batch_unsupported`` when ``provider`` does not
            use file-reference batches.
    """
    from .registry import get_adapter

    protocol = get_adapter(provider).batch_protocol
    if not isinstance(protocol, FileReferenceBatch):
        raise ConfigurationError(
            provider, "batch_unsupported", f"{provider} does not accept JSONL batch uploads"
        )
    lines = []
    for item in requests:
        spec = item if isinstance(item, BatchRequestSpec) else BatchRequestSpec.model_validate(item)
        body = compact(
            {
                "model": spec.model,
                "messages": [{"role": m.role, "content": m.content} for m in spec.messages],
                "max_tokens": spec.max_tokens,
                "temperature": spec.temperature,
                "top_p": spec.top_p,
            }
        )
        lines.append(
            json.dumps(
                {"custom_id": spec.custom_id, "method": "POST", "url": protocol.endpoint, "body": body},
                ensure_ascii=False,
            )
        )
    return "\n".join(lines)


__all__ = ["FileReferenceBatch", "InlineBatch", "HybridBatch", "build_batch_jsonl"]
