"""Public surface for canonical models.

Re-exports the one-concern-per-file implementations under
``llm_universal.base.models_parts``.
"""

from .models_parts import (
    BatchConfig,
    BatchRequestSpec,
    CanonicalModel,
    CanonicalRequest,
    CompletionWindow,
    Message,
    ProviderName,
    RequestDescriptor,
    ResponseFormat,
    Role,
    ToolSpec,
)

__all__ = [
    "CanonicalModel",
    "Role",
    "Message",
    "ToolSpec",
    "ResponseFormat",
    "ProviderName",
    "CompletionWindow",
    "BatchRequestSpec",
    "BatchConfig",
    "CanonicalRequest",
    "RequestDescriptor",
]
