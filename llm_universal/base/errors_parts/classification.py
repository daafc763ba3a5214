"""
Failure classification mapping transport outcomes to typed errors.

``classify_failure`` accepts whatever the transport produced (an
``httpx.Response``, an ``httpx`` exception, an ``asyncio`` timeout, or any
exception carrying a ``.response``) and returns exactly one :class:`LLMError`.

Priority:
    1. No response: timeout vs. network failure.
    2. 401/403 authentication.
    3. 404 model not found (model recovered from body, URL, or hint).
    4. 400/422 content filter vs. validation.
    5. 429 quota vs. rate limit (with ``Retry-After``).
    6. 500/502/503/504 service error.
    7. Anything else: unclassified, carrying the raw status.
"""
from __future__ import annotations

import asyncio
import re
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import httpx

from ..resilience.retry import parse_retry_after
from .llm_error import (
    AuthenticationError,
    ContentFilterError,
    LLMError,
    ModelNotFoundError,
    NetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    RateLimitError,
    RequestValidationError,
    ServiceError,
    UnclassifiedHTTPError,
)

CONTENT_FILTER_TERMS = ("filter", "policy", "safety")
QUOTA_TERMS = ("quota", "billing")
SERVICE_STATUSES = frozenset({500, 502, 503, 504})

_MODEL_URL_PATTERNS = (
    re.compile(r"/models/([^/?]+)"),
    re.compile(r"[?&]model=([^&]+)"),
    re.compile(r"/([^/]+)/chat"),
)
_VERSION_SEGMENT = re.compile(r"^v\d+(beta|alpha)?\d*$")


def extract_model_from_url(url: Optional[str]) -> Optional[str]:
    """Best-effort recovery of a model name from a request URL."""
    if not url:
        return None
    for pattern in _MODEL_URL_PATTERNS:
        match = pattern.search(url)
        if not match:
            continue
        candidate = unquote(match.group(1)).split(":", 1)[0]
        if candidate and not _VERSION_SEGMENT.match(candidate):
            return candidate
    return None


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return True
    return "timeout" in str(exc).lower() or "timed out" in str(exc).lower()


def _response_of(outcome: Any) -> Optional[httpx.Response]:
    if isinstance(outcome, httpx.Response):
        return outcome
    resp = getattr(outcome, "response", None)
    return resp if isinstance(resp, httpx.Response) else None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_section(body: Any) -> Dict[str, Any]:
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"]
    return {}


def _extract_message(body: Any, response: httpx.Response) -> str:
    """Pull the most specific human-readable message out of an error body."""
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
        if isinstance(err, str):
            return err
        for key in ("message", "detail"):
            if isinstance(body.get(key), str):
                return body[key]
    text = response.text.strip() if response.content else ""
    return text[:500] if text else f"HTTP {response.status_code} {response.reason_phrase}".strip()


def _violations(body: Any) -> List[Dict[str, Any]]:
    details = _error_section(body).get("details")
    if details is None and isinstance(body, dict):
        details = body.get("details")
    if isinstance(details, list):
        return [d if isinstance(d, dict) else {"message": str(d)} for d in details]
    if isinstance(details, dict):
        return [details]
    return []


def _request_url(response: httpx.Response) -> Optional[str]:
    try:
        return str(response.request.url)
    except RuntimeError:
        return None


def _status_error(response: httpx.Response, message: str) -> httpx.HTTPStatusError:
    """Wrap a bare failed response so it can travel as ``cause``."""
    try:
        request = response.request
    except RuntimeError:
        request = None
    return httpx.HTTPStatusError(
        f"HTTP {response.status_code}: {message}", request=request, response=response  # type: ignore[arg-type]
    )


def classify_failure(
    outcome: Any,
    provider: str,
    *,
    url: Optional[str] = None,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
) -> LLMError:
    """Classify a failed transport outcome into one typed error.

    Args:
        outcome: ``httpx.Response`` or the exception raised by the transport.
        provider: Provider identifier the call targeted.
        url: Request URL, used to recover model names on 404.
        model: Model hint used when neither body nor URL names one.
        timeout: Deadline that applied to the attempt, for timeout messages.
    """
    if isinstance(outcome, LLMError):
        return outcome

    cause = outcome if isinstance(outcome, BaseException) else None
    response = _response_of(outcome)

    if response is None:
        if cause is not None and _is_timeout(cause):
            return ProviderTimeoutError(provider, timeout, str(cause) or None, cause=cause)
        return NetworkError(provider, str(cause) if cause is not None and str(cause) else None, cause=cause)

    status = response.status_code
    body = _json_body(response)
    message = _extract_message(body, response)
    lowered = message.lower()
    if cause is None:
        cause = _status_error(response, message)

    if status in (401, 403):
        return AuthenticationError(provider, message, status_code=status, cause=cause)

    if status == 404:
        found = _error_section(body).get("model")
        recovered = (
            found
            if isinstance(found, str)
            else extract_model_from_url(url or _request_url(response)) or model
        )
        return ModelNotFoundError(provider, recovered, message, cause=cause)

    if status in (400, 422):
        if any(term in lowered for term in CONTENT_FILTER_TERMS):
            return ContentFilterError(provider, message, status_code=status, cause=cause)
        return RequestValidationError(provider, _violations(body), message, status_code=status, cause=cause)

    if status == 429:
        if any(term in lowered for term in QUOTA_TERMS):
            return QuotaExceededError(provider, "billing", message, cause=cause)
        retry_after = parse_retry_after(response.headers.get("retry-after"))
        return RateLimitError(provider, retry_after, message, cause=cause)

    if status in SERVICE_STATUSES:
        return ServiceError(provider, status, message, cause=cause)

    return UnclassifiedHTTPError(provider, status, message, cause=cause)


__all__ = [
    "classify_failure",
    "extract_model_from_url",
    "CONTENT_FILTER_TERMS",
    "QUOTA_TERMS",
]
