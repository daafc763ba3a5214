"""Canonical request and descriptor models."""

from .message import CanonicalModel, Message, ResponseFormat, Role, ToolSpec
from .canonical_request import (
    BatchConfig,
    BatchRequestSpec,
    CanonicalRequest,
    CompletionWindow,
    ProviderName,
)
from .request_descriptor import RequestDescriptor

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
