"""
Normalized error kinds (taxonomy).

Defines the `ErrorKind` enumeration shared by every typed error. Values are
lowercase snake_case and are a stable public contract for logging and
analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated failure categories."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    MODEL_NOT_FOUND = "model_not_found"
    CONTENT_FILTER = "content_filter"
    RATE_LIMIT = "rate_limit"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVICE = "service"
    TIMEOUT = "timeout"
    NETWORK = "network"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.RATE_LIMIT,
        ErrorKind.SERVICE,
        ErrorKind.TIMEOUT,
        ErrorKind.NETWORK,
    }
)


def is_retryable(kind: ErrorKind) -> bool:
    """Return True when a failure of ``kind`` may succeed on a later attempt."""
    return kind in RETRYABLE_KINDS


__all__ = ["ErrorKind", "RETRYABLE_KINDS", "is_retryable"]
