"""Provider adapter base class.

Purpose
-------
An adapter owns everything provider-specific about turning a validated
:class:`CanonicalRequest` into an HTTP call: the auth header scheme, the URL
for each mode, and the body shape. Adding a provider means registering one
adapter; no caller-visible code changes.

Contract
--------
- ``headers`` always starts from ``Content-Type: application/json``.
- Any API key present is sanitized, whatever the auth scheme.
- Payloads never contain ``provider``, ``api_key``/``apiKey`` or ``batch``.
- Every URL passes :func:`validate_url` before it is returned.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from ...config.defaults import API_KEY_REQUIRED
from ...config.endpoints import resolve_endpoint
from ..errors import ConfigurationError
from ..logging import get_logger, log_event
from ..models import CanonicalRequest
from ..security import sanitize_api_key, validate_url

BASE_HEADERS = {"Content-Type": "application/json"}

# Auth schemes.
BEARER = "bearer"
X_API_KEY = "x-api-key"
NO_AUTH = "none"

_LOG = get_logger("llm_universal.adapters")


class ProviderAdapter:
    """Translate canonical requests for one provider.

    Subclasses implement :meth:`build_chat_payload` and may override
    :meth:`extra_headers`. Batch support is delegated to ``batch_protocol``.
    """

    auth_scheme: str = BEARER

    def __init__(self, provider: str, *, batch_protocol: Any = None) -> None:
        self.provider = provider
        self.batch_protocol = batch_protocol

    @property
    def key_required(self) -> bool:
        return self.provider in API_KEY_REQUIRED

    @property
    def supports_batch(self) -> bool:
        return self.batch_protocol is not None

    # ---- headers ----

    def api_key(self, req: CanonicalRequest, min_api_key_length: Optional[int] = None) -> Optional[str]:
        """Return the sanitized key, or ``None`` when absent and optional.

        Raises:
            ConfigurationError: ``missing_api_key`` for key-required providers,
                ``invalid_api_key`` when sanitization rejects the key.
        """
        if req.api_key is None:
            if self.key_required:
                raise ConfigurationError(
                    self.provider, "missing_api_key", f"API key is required for provider: {self.provider}"
                )
            return None
        return sanitize_api_key(req.api_key, self.provider, min_api_key_length)

    def extra_headers(self, req: CanonicalRequest, mode: str) -> Dict[str, str]:
        return {}

    def headers(
        self, req: CanonicalRequest, mode: str = "chat", *, min_api_key_length: Optional[int] = None
    ) -> Dict[str, str]:
        """Build the header map for ``req`` in ``mode``."""
        out = dict(BASE_HEADERS)
        key = self.api_key(req, min_api_key_length)
        if key is not None:
            if self.auth_scheme == BEARER:
                out["Authorization"] = f"Bearer {key}"
            elif self.auth_scheme == X_API_KEY:
                out["x-api-key"] = key
        out.update(self.extra_headers(req, mode))
        return out

    # ---- url ----

    def url(self, req: CanonicalRequest, mode: str = "chat") -> str:
        """Resolve and validate the endpoint URL for ``mode``."""
        try:
            url = resolve_endpoint(self.provider, mode, req.model)
        except LookupError as exc:
            raise ConfigurationError(self.provider, "missing_endpoint", str(exc), cause=exc) from exc
        return validate_url(url, self.provider)

    # ---- payloads ----

    def payload(self, req: CanonicalRequest, mode: str = "chat") -> Optional[Dict[str, Any]]:
        """Return the request body for ``mode`` (``None`` for ``models``)."""
        if mode == "models":
            return None
        if mode == "batch":
            return self.batch_payload(req)
        return self.build_chat_payload(req)

    def build_chat_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        raise NotImplementedError

    def batch_payload(self, req: CanonicalRequest) -> Dict[str, Any]:
        """Build the batch submission body via the provider's batch protocol."""
        if self.batch_protocol is None:
            raise ConfigurationError(
                self.provider,
                "batch_unsupported",
                f"Batch processing not supported for provider: {self.provider}",
            )
        if req.batch is None:
            raise ConfigurationError(
                self.provider,
                "missing_batch_config",
                f"Batch mode for {self.provider} requires a 'batch' configuration object",
            )
        return self.batch_protocol.build(self, req)

    def omit(self, req: CanonicalRequest, fields: Iterable[str]) -> None:
        """Log (debug) canonical fields this provider cannot carry."""
        present = [f for f in fields if getattr(req, f, None) is not None]
        if present:
            log_event(
                _LOG,
                "payload.field_omitted",
                level=logging.DEBUG,
                provider=self.provider,
                model=req.model,
                fields=present,
            )


def openai_tools(req: CanonicalRequest) -> Optional[list]:
    """Render tools in the ``{type: "function", function: {...}}`` form."""
    if not req.tools:
        return None
    return [
        {"type": "function", "function": t.model_dump(exclude_none=True)}
        for t in req.tools
    ]


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` values."""
    return {k: v for k, v in data.items() if v is not None}


__all__ = [
    "ProviderAdapter",
    "BASE_HEADERS",
    "BEARER",
    "X_API_KEY",
    "NO_AUTH",
    "openai_tools",
    "compact",
]
