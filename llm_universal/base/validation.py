"""Canonical request validation.

``validate_request`` is the single entry point turning caller input into a
frozen :class:`CanonicalRequest`. All schema violations are collected in one
pass and raised together; nothing here performs I/O.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from ..config.defaults import PROVIDERS
from .errors import RequestValidationError
from .models import CanonicalRequest

UNKNOWN_PROVIDER = "unknown"


def _provider_hint(data: Mapping[str, Any]) -> str:
    candidate = data.get("provider")
    return candidate if isinstance(candidate, str) and candidate in PROVIDERS else UNKNOWN_PROVIDER


def _violations(exc: ValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "request"
        out.append({"field": field, "message": err.get("msg", ""), "type": err.get("type", "")})
    return out


def validate_request(data: Any) -> CanonicalRequest:
    """Validate ``data`` and return a :class:`CanonicalRequest`.

    Accepts a mapping (camelCase or snake_case keys) or an already validated
    request, which is returned as-is. Unknown keys are ignored.

    Raises:
        RequestValidationError: with every violation as ``{field, message, type}``.
    """
    if isinstance(data, CanonicalRequest):
        return data
    if not isinstance(data, Mapping):
        raise RequestValidationError(
            UNKNOWN_PROVIDER,
            [{"field": "request", "message": "request must be a mapping", "type": "type_error"}],
            "Request must be a mapping of fields",
        )
    try:
        return CanonicalRequest.model_validate(dict(data))
    except ValidationError as exc:
        violations = _violations(exc)
        provider = _provider_hint(data)
        summary = "; ".join(f"{v['field']}: {v['message']}" for v in violations)
        raise RequestValidationError(
            provider, violations, f"Invalid request for {provider}: {summary}", cause=exc
        ) from exc


__all__ = ["validate_request", "UNKNOWN_PROVIDER"]
