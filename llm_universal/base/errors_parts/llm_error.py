"""
Structured error exception types.

Every failure that leaves this package is an :class:`LLMError` subclass with a
normalized :class:`ErrorKind`, the provider it concerns, and the original
exception kept on ``cause`` for diagnostics.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .error_kind import ErrorKind, is_retryable


class LLMError(Exception):
    """Base typed error.

    Attributes:
        kind: Normalized :class:`ErrorKind` for the failure.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        message: Human-readable message suitable for logging.
        status_code: HTTP status when one was received.
        retry_after: Seconds the provider asked us to wait, when known.
        cause: Original transport/HTTP exception, if any.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        provider: str,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def retryable(self) -> bool:
        """Whether re-attempting the same call may succeed."""
        return is_retryable(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly view for logging (``cause`` excluded)."""
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": type(self).__name__,
            "provider": self.provider,
            "message": self.message,
            "status_code": self.status_code,
            "retryable": self.retryable,
            "timestamp": self.timestamp,
        }
        if self.retry_after is not None:
            data["retry_after"] = self.retry_after
        return data

    def __str__(self) -> str:  # pragma: no cover - trivial
        status = f" ({self.status_code})" if self.status_code is not None else ""
        return f"{self.provider} {self.kind.value}{status}: {self.message}"


class RequestValidationError(LLMError):
    """Malformed request: rejected locally or by the provider (400/422)."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        provider: str,
        violations: Optional[List[Dict[str, Any]]] = None,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            message or f"Invalid request to {provider}",
            provider,
            status_code=status_code,
            cause=cause,
        )
        self.violations: List[Dict[str, Any]] = list(violations or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["violations"] = self.violations
        return data


class AuthenticationError(LLMError):
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, provider: str, message: Optional[str] = None, *, status_code: int = 401, cause=None) -> None:
        super().__init__(
            message or f"Authentication failed for {provider}. Please check your API key.",
            provider,
            status_code=status_code,
            cause=cause,
        )


class ModelNotFoundError(LLMError):
    kind = ErrorKind.MODEL_NOT_FOUND

    def __init__(self, provider: str, model: Optional[str], message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(
            message or f"Model '{model}' not found or unavailable on {provider}",
            provider,
            status_code=404,
            cause=cause,
        )
        self.model = model


class ContentFilterError(LLMError):
    kind = ErrorKind.CONTENT_FILTER

    def __init__(self, provider: str, reason: Optional[str] = None, *, status_code: int = 400, cause=None) -> None:
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Content filtered by {provider}{suffix}", provider, status_code=status_code, cause=cause)
        self.reason = reason


class RateLimitError(LLMError):
    """Provider (or local pre-check) refused the call for rate reasons."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        provider: str,
        retry_after: Optional[float] = None,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = 429,
        cause=None,
    ) -> None:
        hint = f". Retry after {retry_after:g}s" if retry_after is not None else ""
        super().__init__(
            message or f"Rate limit exceeded for {provider}{hint}",
            provider,
            status_code=status_code,
            retry_after=retry_after,
            cause=cause,
        )


class QuotaExceededError(LLMError):
    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, provider: str, quota_type: str = "usage", message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(
            message or f"{quota_type} quota exceeded for {provider}",
            provider,
            status_code=429,
            cause=cause,
        )
        self.quota_type = quota_type


class ServiceError(LLMError):
    kind = ErrorKind.SERVICE

    def __init__(self, provider: str, status_code: int, message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(
            message or f"Service error from {provider} ({status_code})",
            provider,
            status_code=status_code,
            cause=cause,
        )


class ProviderTimeoutError(LLMError):
    """An attempt exceeded its deadline (transport or caller-supplied)."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, provider: str, timeout: Optional[float] = None, message: Optional[str] = None, *, cause=None) -> None:
        after = f" after {timeout:g}s" if timeout is not None else ""
        super().__init__(message or f"Request to {provider} timed out{after}", provider, cause=cause)
        self.timeout = timeout


class NetworkError(LLMError):
    kind = ErrorKind.NETWORK

    def __init__(self, provider: str, message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(message or f"Network error connecting to {provider}", provider, cause=cause)


class ConfigurationError(LLMError):
    """Caller misconfiguration or a failed security check. Never retried."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, provider: str, issue: str, message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(message or f"Configuration error for {provider}: {issue}", provider, cause=cause)
        self.issue = issue


class UnclassifiedHTTPError(LLMError):
    kind = ErrorKind.UNKNOWN

    def __init__(self, provider: str, status_code: Optional[int], message: Optional[str] = None, *, cause=None) -> None:
        super().__init__(message or f"HTTP {status_code} error", provider, status_code=status_code, cause=cause)


__all__ = [
    "LLMError",
    "RequestValidationError",
    "AuthenticationError",
    "ModelNotFoundError",
    "ContentFilterError",
    "RateLimitError",
    "QuotaExceededError",
    "ServiceError",
    "ProviderTimeoutError",
    "NetworkError",
    "ConfigurationError",
    "UnclassifiedHTTPError",
]
