"""
Message and tool DTOs used by the canonical request.

Defines the `Message` model and the `Role` literal, plus `ToolSpec` for
function-call declarations. All canonical models share `CanonicalModel`
configuration: frozen, camelCase aliases, unknown fields ignored.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# Message roles accepted from callers.
Role = Literal["system", "user", "assistant", "tool"]


class CanonicalModel(BaseModel):
    """Shared configuration for canonical request models.

    - ``frozen``: a validated request is never mutated downstream.
    - ``extra="ignore"``: unknown caller fields are dropped, never forwarded.
    - camelCase aliases with ``populate_by_name`` so both ``maxTokens`` and
      ``max_tokens`` are accepted.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Message(CanonicalModel):
    """A single chat turn; list order is conversation order."""

    role: Role
    content: str


class ToolSpec(CanonicalModel):
    """Function-call declaration.

    Accepts the flat ``{name, description, parameters}`` shape and the
    OpenAI nested ``{type: "function", function: {...}}`` shape.
    """

    name: str = Field(min_length=1)
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_function(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            return data["function"]
        return data


class ResponseFormat(CanonicalModel):
    type: Literal["text", "json_object"]


__all__ = ["CanonicalModel", "Role", "Message", "ToolSpec", "ResponseFormat"]
