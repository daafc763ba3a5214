"""llm_universal package

One canonical LLM request description translated into the exact HTTP call a
provider expects, executed with timeouts, bounded retries, rate-limit
awareness and a typed error taxonomy.

Public API (re-exported):
    - Version: ``__version__``
    - Building: :func:`validate_request`, :func:`create_request`
    - Executing: :class:`ExecutionEngine`, :func:`execute_request`
    - Errors: :class:`LLMError` and its subclasses, :class:`ErrorKind`
    - Rate limits: :class:`RateLimitTracker`
    - Telemetry: :func:`add_event_hook`, :func:`remove_event_hook`
"""

from .base import (
    AuthenticationError,
    CanonicalRequest,
    ConfigurationError,
    ContentFilterError,
    ErrorKind,
    ExecutionEngine,
    LLMError,
    ModelNotFoundError,
    NetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    RateLimitError,
    RateLimitTracker,
    RequestDescriptor,
    RequestValidationError,
    RetryPolicy,
    ServiceError,
    UnclassifiedHTTPError,
    create_request,
    execute_request,
    validate_request,
)
from .base.logging import add_event_hook, configure_logger, remove_event_hook

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "validate_request",
    "create_request",
    "ExecutionEngine",
    "execute_request",
    "CanonicalRequest",
    "RequestDescriptor",
    "RetryPolicy",
    "RateLimitTracker",
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
    "add_event_hook",
    "remove_event_hook",
    "configure_logger",
]
