"""Typed error taxonomy public surface.

This module re-exports the implementations under
``llm_universal.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_kind import ErrorKind, RETRYABLE_KINDS, is_retryable
from .errors_parts.llm_error import (
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
from .errors_parts.classification import classify_failure, extract_model_from_url

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
