"""Configuration layer: static tables, defaults, and environment settings.

Static data (endpoint and rate-limit tables) is versioned and replaceable.
``get_settings()`` resolves operational knobs from the environment once per
process; ``reset_settings()`` exists for tests.
"""

from __future__ import annotations

from .endpoints import (
    BASE_URLS,
    BATCH_ENDPOINTS,
    CHAT_ENDPOINTS,
    ENDPOINTS_VERSION,
    MODEL_ENDPOINTS,
    resolve_endpoint,
)
from .rate_limits import PROVIDER_RATE_LIMITS, RATE_LIMITS_VERSION
from .settings import Settings, get_settings, load_settings, reset_settings

__all__ = [
    "BASE_URLS",
    "BATCH_ENDPOINTS",
    "CHAT_ENDPOINTS",
    "ENDPOINTS_VERSION",
    "MODEL_ENDPOINTS",
    "resolve_endpoint",
    "PROVIDER_RATE_LIMITS",
    "RATE_LIMITS_VERSION",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
