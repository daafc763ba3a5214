"""Sliding-window rate-limit tracker.

Purpose:
    Track per-provider request and token usage over a 60 second and a 24 hour
    window and answer "may I send now, and if not how long should I wait?"
    before each attempt.

Notes:
    - Windows are lists of ``(timestamp, tokens)`` entries. Token totals are
      recomputed from the surviving entries after every purge so they never
      drift from the entries they describe.
    - Mutation (``record``, ``check``, ``reset``) is serialized by a lock;
      ``get_usage_stats`` reads a snapshot without taking it.
    - The clock is injectable so windows can be driven deterministically.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ...config.rate_limits import PROVIDER_RATE_LIMITS, RPD, RPM, TPD, TPM

MINUTE_SECONDS = 60.0
DAY_SECONDS = 86400.0

Entry = Tuple[float, int]
Limits = Mapping[str, Mapping[str, Mapping[str, Any]]]


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a pre-check.

    Attributes:
        allowed: Whether the call fits inside every configured bound.
        wait_time: Seconds until the violated bound frees up (0 when allowed).
        reason: Short human-readable explanation.
    """

    allowed: bool
    wait_time: float = 0.0
    reason: str = "Within limits"


@dataclass
class UsageWindow:
    """Usage entries for one provider."""

    minute: List[Entry] = field(default_factory=list)
    day: List[Entry] = field(default_factory=list)
    minute_tokens: int = 0
    day_tokens: int = 0

    def purge(self, now: float) -> None:
        self.minute = [e for e in self.minute if e[0] > now - MINUTE_SECONDS]
        self.day = [e for e in self.day if e[0] > now - DAY_SECONDS]
        self.minute_tokens = sum(t for _, t in self.minute)
        self.day_tokens = sum(t for _, t in self.day)


def resolve_limit(value: Any, model: Optional[str]) -> Optional[int]:
    """Resolve a bound that may be per-model.

    Scalars are returned as-is. For a mapping of model-name prefixes the
    longest prefix of ``model`` wins; with no model or no match the smallest
    listed bound applies.
    """
    if not isinstance(value, Mapping):
        return value
    if model:
        matches = [k for k in value if model.startswith(k)]
        if matches:
            return value[max(matches, key=len)]
    bounds = [v for v in value.values() if v is not None]
    return min(bounds) if bounds else None


def _count_wait(entries: List[Entry], window: float, now: float) -> float:
    if not entries:
        # a zero bound denies even an empty window
        return window
    oldest = min(ts for ts, _ in entries)
    return max(0.0, window - (now - oldest))


def _token_wait(entries: List[Entry], used: int, tokens: int, limit: int, window: float, now: float) -> float:
    """Seconds until enough old entries expire for ``tokens`` to fit."""
    remaining = used
    for ts, spent in sorted(entries):
        remaining -= spent
        if remaining + tokens <= limit:
            return max(0.0, window - (now - ts))
    return window


class RateLimitTracker:
    """Per-provider usage tracker checked before each attempt.

    Args:
        limits: Provider -> tier -> bounds table. Defaults to the baseline
            :data:`PROVIDER_RATE_LIMITS`; pass the result of
            :func:`load_rate_limit_table` to use a file.
        clock: Returns the current time in seconds.
    """

    def __init__(self, limits: Limits | None = None, clock: Callable[[], float] = time.time) -> None:
        self.limits: Limits = PROVIDER_RATE_LIMITS if limits is None else limits
        self._clock = clock
        self._lock = threading.Lock()
        self._usage: Dict[str, UsageWindow] = {}

    def _window(self, provider: str) -> UsageWindow:
        window = self._usage.get(provider)
        if window is None:
            window = self._usage[provider] = UsageWindow()
        return window

    def tier_limits(self, provider: str, tier: Optional[str]) -> Optional[Mapping[str, Any]]:
        """Return the bounds for ``provider``/``tier``.

        ``tier=None`` selects the provider's first listed tier. Unknown
        providers or tiers yield ``None`` (unconstrained).
        """
        tiers = self.limits.get(provider)
        if not tiers:
            return None
        if tier is None:
            return next(iter(tiers.values()))
        return tiers.get(tier)

    def record(self, provider: str, tokens: int = 0) -> None:
        """Record one sent request consuming ``tokens``."""
        now = self._clock()
        with self._lock:
            window = self._window(provider)
            window.purge(now)
            entry = (now, int(tokens or 0))
            window.minute.append(entry)
            window.day.append(entry)
            window.minute_tokens += entry[1]
            window.day_tokens += entry[1]

    def check(
        self,
        provider: str,
        tier: Optional[str] = "free",
        tokens: int = 0,
        model: Optional[str] = None,
    ) -> RateLimitDecision:
        """Check whether a request of ``tokens`` may be sent now.

        Bounds are evaluated in order RPM, TPM, RPD, TPD and the first violated
        one decides the wait. ``None`` bounds are skipped.
        """
        limits = self.tier_limits(provider, tier)
        if not limits:
            return RateLimitDecision(True, 0.0, "No limits defined")
        now = self._clock()
        with self._lock:
            window = self._window(provider)
            window.purge(now)

            rpm = resolve_limit(limits.get(RPM), model)
            if rpm is not None and len(window.minute) >= rpm:
                return RateLimitDecision(
                    False,
                    _count_wait(window.minute, MINUTE_SECONDS, now),
                    f"RPM limit exceeded ({len(window.minute)}/{rpm})",
                )

            tpm = resolve_limit(limits.get(TPM), model)
            if tpm is not None and window.minute_tokens + tokens > tpm:
                return RateLimitDecision(
                    False,
                    _token_wait(window.minute, window.minute_tokens, tokens, tpm, MINUTE_SECONDS, now),
                    f"TPM limit would be exceeded ({window.minute_tokens + tokens}/{tpm})",
                )

            rpd = resolve_limit(limits.get(RPD), model)
            if rpd is not None and len(window.day) >= rpd:
                return RateLimitDecision(
                    False,
                    _count_wait(window.day, DAY_SECONDS, now),
                    f"RPD limit exceeded ({len(window.day)}/{rpd})",
                )

            tpd = resolve_limit(limits.get(TPD), model)
            if tpd is not None and window.day_tokens + tokens > tpd:
                return RateLimitDecision(
                    False,
                    _token_wait(window.day, window.day_tokens, tokens, tpd, DAY_SECONDS, now),
                    f"TPD limit would be exceeded ({window.day_tokens + tokens}/{tpd})",
                )

        return RateLimitDecision(True, 0.0, "Within limits")

    def get_usage_stats(self, provider: str) -> Dict[str, int]:
        """Return current window counts for ``provider`` (no lock taken)."""
        window = self._usage.get(provider)
        if window is None:
            return {"requests_last_minute": 0, "requests_last_day": 0, "tokens_last_minute": 0, "tokens_last_day": 0}
        now = self._clock()
        minute = [e for e in list(window.minute) if e[0] > now - MINUTE_SECONDS]
        day = [e for e in list(window.day) if e[0] > now - DAY_SECONDS]
        return {
            "requests_last_minute": len(minute),
            "requests_last_day": len(day),
            "tokens_last_minute": sum(t for _, t in minute),
            "tokens_last_day": sum(t for _, t in day),
        }

    def reset(self, provider: Optional[str] = None) -> None:
        """Forget usage for ``provider`` (or every provider)."""
        with self._lock:
            if provider is None:
                self._usage.clear()
            else:
                self._usage.pop(provider, None)


__all__ = [
    "RateLimitDecision",
    "RateLimitTracker",
    "UsageWindow",
    "resolve_limit",
    "MINUTE_SECONDS",
    "DAY_SECONDS",
]
