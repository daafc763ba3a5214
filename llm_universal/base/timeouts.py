"""Per-attempt timeout resolution.

Each provider has its own default per-attempt timeout
(:data:`~llm_universal.config.defaults.DEFAULT_PROVIDER_TIMEOUTS`), optionally
overridden through ``LLM_UNIVERSAL_TIMEOUT_<PROVIDER>_SECONDS``. Every value,
including an explicit caller override, is capped at the library ceiling.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config.settings import Settings, get_settings


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds).

    Attributes:
        default_seconds: Used for providers without an explicit entry.
        max_seconds: Ceiling applied to every resolved value.
        per_provider: Provider id to per-attempt timeout.
    """

    default_seconds: float
    max_seconds: float
    per_provider: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TimeoutConfig":
        s = settings or get_settings()
        return cls(
            default_seconds=s.default_timeout_seconds,
            max_seconds=s.max_timeout_seconds,
            per_provider=dict(s.provider_timeouts),
        )

    def timeout_for(self, provider: str, override: Optional[float] = None) -> float:
        """Return the per-attempt timeout for ``provider``.

        A positive ``override`` replaces the provider default; the ceiling
        still applies.
        """
        if override is not None and override > 0:
            value = float(override)
        else:
            value = self.per_provider.get(provider, self.default_seconds)
        return min(value, self.max_seconds)


def get_timeout_config() -> TimeoutConfig:
    """Return a :class:`TimeoutConfig` built from the cached settings."""
    return TimeoutConfig.from_settings()


def timeout_for(provider: str, override: Optional[float] = None) -> float:
    """Module-level shortcut for ``get_timeout_config().timeout_for``."""
    return get_timeout_config().timeout_for(provider, override)


__all__ = ["TimeoutConfig", "get_timeout_config", "timeout_for"]
