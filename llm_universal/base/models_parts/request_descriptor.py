"""
Transport-ready request descriptor.

Produced by the assembler from a validated canonical request and consumed by
the execution engine. Created fresh per call and never shared.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestDescriptor:
    """One HTTP call, fully resolved.

    Attributes:
        method: HTTP verb (``POST`` or ``GET``).
        url: Absolute, validated URL.
        headers: Header map including auth.
        body: JSON body, or ``None`` for body-less calls.
        provider: Provider identifier (diagnostics only, never sent).
        mode: ``chat``, ``models`` or ``batch``.
        model: Model name (diagnostics only).
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None
    provider: str = ""
    mode: str = "chat"
    model: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire-level view ``{method, url, headers, body}``."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
        }


__all__ = ["RequestDescriptor"]
