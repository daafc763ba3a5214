"""Request assembler.

Turns caller input into a :class:`RequestDescriptor` (method, URL, headers,
body) without performing any I/O. Batch mode is selected automatically when
``batch.enabled`` is set.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .adapters import get_adapter
from .errors import ConfigurationError
from .models import RequestDescriptor
from .security import validate_url
from .validation import validate_request

MODES = ("chat", "models", "batch")


def _check_header_overrides(provider: str, headers: Mapping[str, str]) -> dict:
    out = {}
    for name, value in headers.items():
        text = str(value)
        if any(c in text or c in str(name) for c in "\r\n"):
            raise ConfigurationError(provider, "invalid_header", f"Header '{name}' contains a line break")
        out[str(name)] = text
    return out


def create_request(
    data: Any,
    *,
    mode: str = "chat",
    url: Optional[str] = None,
    method: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    min_api_key_length: Optional[int] = None,
) -> RequestDescriptor:
    """Validate ``data`` and build the provider-specific HTTP call.

    Parameters
    ----------
    data:
        Mapping (or :class:`CanonicalRequest`) describing the call.
    mode:
        ``chat`` (default), ``models`` (GET without body) or ``batch``.
    url:
        Optional override; validated like table URLs.
    method:
        Optional HTTP method override.
    headers:
        Extra headers merged last, overriding provider headers.
    min_api_key_length:
        Override of the configured API key length floor.

    Raises
    ------
    RequestValidationError
        Schema violations.
    ConfigurationError
        Missing or malformed key, disallowed URL, unsupported batch provider,
        missing batch field or endpoint.
    """
    req = validate_request(data)
    if mode not in MODES:
        raise ConfigurationError(req.provider, "unsupported_mode", f"Unknown request mode '{mode}'")
    if req.is_batch and mode == "chat":
        mode = "batch"
    adapter = get_adapter(req.provider)

    request_headers = adapter.headers(req, mode, min_api_key_length=min_api_key_length)
    body = adapter.payload(req, mode)
    final_url = validate_url(url, req.provider) if url else adapter.url(req, mode)
    if headers:
        request_headers.update(_check_header_overrides(req.provider, headers))

    return RequestDescriptor(
        method=(method or ("GET" if mode == "models" else "POST")).upper(),
        url=final_url,
        headers=request_headers,
        body=body,
        provider=req.provider,
        mode=mode,
        model=req.model,
    )


__all__ = ["create_request", "MODES"]
