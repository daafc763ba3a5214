"""Core request translation and resilience layer.

Submodules:
    models      canonical request and request descriptor DTOs
    validation  ``validate_request``
    security    API key sanitization and URL validation
    adapters    per-provider header/URL/payload translation and batch protocols
    assembler   ``create_request``
    engine      ``ExecutionEngine`` / ``execute_request``
    errors      typed error taxonomy and ``classify_failure``
    rate_limits ``RateLimitTracker`` and table helpers
"""

from .adapters import ADAPTERS, ProviderAdapter, build_batch_jsonl, get_adapter, register_adapter
from .assembler import create_request
from .engine import ExecutionEngine, ExecutionState, execute_request
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ContentFilterError,
    ErrorKind,
    LLMError,
    ModelNotFoundError,
    NetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    RateLimitError,
    RequestValidationError,
    ServiceError,
    UnclassifiedHTTPError,
    classify_failure,
    is_retryable,
)
from .models import CanonicalRequest, RequestDescriptor
from .rate_limits import RateLimitDecision, RateLimitTracker
from .resilience import RetryPolicy, next_delay
from .security import sanitize_api_key, validate_url
from .validation import validate_request

__all__ = [
    "ADAPTERS",
    "ProviderAdapter",
    "build_batch_jsonl",
    "get_adapter",
    "register_adapter",
    "create_request",
    "ExecutionEngine",
    "ExecutionState",
    "execute_request",
    "ErrorKind",
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
    "is_retryable",
    "CanonicalRequest",
    "RequestDescriptor",
    "RateLimitDecision",
    "RateLimitTracker",
    "RetryPolicy",
    "next_delay",
    "sanitize_api_key",
    "validate_url",
    "validate_request",
]
