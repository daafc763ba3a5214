"""Rate-limit tracking and baseline table helpers."""

from .tables import (
    load_rate_limit_table,
    parse_rate_limit_headers,
    provider_documentation,
    recommended_tier,
)
from .tracker import RateLimitDecision, RateLimitTracker, UsageWindow, resolve_limit

__all__ = [
    "RateLimitDecision",
    "RateLimitTracker",
    "UsageWindow",
    "resolve_limit",
    "load_rate_limit_table",
    "parse_rate_limit_headers",
    "provider_documentation",
    "recommended_tier",
]
