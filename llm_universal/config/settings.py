"""Operational settings resolved from the environment.

Only runtime knobs are read here (timeouts, retry tuning, key-length floor,
an optional rate-limit table file). Credentials and model names are never
sourced from the environment by this package; callers supply them on each
request.

Supported environment variables (all optional):
    LLM_UNIVERSAL_TIMEOUT_SECONDS            default per-attempt timeout
    LLM_UNIVERSAL_TIMEOUT_<PROVIDER>_SECONDS per-provider timeout
                                             (``gh-models`` -> ``GH_MODELS``)
    LLM_UNIVERSAL_MAX_TIMEOUT_SECONDS        ceiling applied to every timeout
    LLM_UNIVERSAL_MAX_RETRIES                retries after the first attempt
    LLM_UNIVERSAL_RETRY_BASE_DELAY           backoff base (seconds)
    LLM_UNIVERSAL_RETRY_MAX_DELAY            backoff cap (seconds)
    LLM_UNIVERSAL_MIN_API_KEY_LENGTH         shortest accepted API key
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict

from .defaults import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIN_API_KEY_LENGTH,
    DEFAULT_PROVIDER_TIMEOUTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_TIMEOUT_SECONDS,
    PROVIDERS,
)

ENV_PREFIX = "LLM_UNIVERSAL_"


@dataclass(frozen=True)
class Settings:
    """Snapshot of operational settings.

    Attributes:
        default_timeout_seconds: Fallback per-attempt timeout.
        max_timeout_seconds: Ceiling applied to every resolved timeout.
        provider_timeouts: Per-provider per-attempt timeouts.
        max_retries: Retries after the first attempt.
        retry_base_delay: Backoff base in seconds.
        retry_max_delay: Backoff cap in seconds.
        min_api_key_length: Shortest API key accepted after sanitization.
    """

    default_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_timeout_seconds: float = MAX_TIMEOUT_SECONDS
    provider_timeouts: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_PROVIDER_TIMEOUTS)
    )
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY
    min_api_key_length: int = DEFAULT_MIN_API_KEY_LENGTH


_CACHED: Settings | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def _parse_env_int(name: str, default: int) -> int:
    """Read ``name`` as a non-negative int, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = int(raw)
    except ValueError:
        return default
    return val if val >= 0 else default


def _env_name(provider: str) -> str:
    return provider.upper().replace("-", "_")


def load_settings() -> Settings:
    """Build a fresh :class:`Settings` from the current environment."""
    default_timeout = _parse_env_float(f"{ENV_PREFIX}TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    timeouts = {
        p: _parse_env_float(
            f"{ENV_PREFIX}TIMEOUT_{_env_name(p)}_SECONDS",
            DEFAULT_PROVIDER_TIMEOUTS.get(p, default_timeout),
        )
        for p in PROVIDERS
    }
    return Settings(
        default_timeout_seconds=default_timeout,
        max_timeout_seconds=_parse_env_float(f"{ENV_PREFIX}MAX_TIMEOUT_SECONDS", MAX_TIMEOUT_SECONDS),
        provider_timeouts=timeouts,
        max_retries=_parse_env_int(f"{ENV_PREFIX}MAX_RETRIES", DEFAULT_MAX_RETRIES),
        retry_base_delay=_parse_env_float(f"{ENV_PREFIX}RETRY_BASE_DELAY", DEFAULT_RETRY_BASE_DELAY),
        retry_max_delay=_parse_env_float(f"{ENV_PREFIX}RETRY_MAX_DELAY", DEFAULT_RETRY_MAX_DELAY),
        min_api_key_length=_parse_env_int(
            f"{ENV_PREFIX}MIN_API_KEY_LENGTH", DEFAULT_MIN_API_KEY_LENGTH
        ),
    )


def get_settings() -> Settings:
    """Return the process-cached settings, loading them on first use."""
    global _CACHED  # noqa: PLW0603 - documented module cache
    if _CACHED is None:
        _CACHED = load_settings()
    return _CACHED


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


__all__ = ["Settings", "load_settings", "get_settings", "reset_settings"]
