"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llm_universal.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind, RETRYABLE_KINDS, is_retryable
from .llm_error import (
    AuthenticationError,
    ConfigurationError,
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
from .classification import classify_failure, extract_model_from_url

__all__ = [
    "ErrorKind",
    "RETRYABLE_KINDS",
    "is_retryable",
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
    "classify_failure",
    "extract_model_from_url",
]
