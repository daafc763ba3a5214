"""Retry policy and backoff computation.

The policy is data; ``next_delay`` is a pure function of the attempt number,
the policy, and a random source, so it can be tested without real time
passing. Suspension (``asyncio.sleep``) lives in the execution engine.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional

from ...config.defaults import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_JITTER,
    DEFAULT_RETRY_MAX_DELAY,
    DEFAULT_RETRY_MULTIPLIER,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff configuration (seconds).

    Attributes:
        max_retries: Retries after the first attempt.
        base_delay: Delay before the first retry, before jitter.
        max_delay: Hard cap on any computed delay.
        multiplier: Growth factor per attempt.
        jitter: Fractional +/- randomization applied to the capped delay.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_RETRY_BASE_DELAY
    max_delay: float = DEFAULT_RETRY_MAX_DELAY
    multiplier: float = DEFAULT_RETRY_MULTIPLIER
    jitter: float = DEFAULT_RETRY_JITTER

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


DEFAULT_RETRY_POLICY = RetryPolicy()


def next_delay(
    attempt: int,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    rand: Callable[[], float] = random.random,
) -> float:
    """Return the delay before retrying after zero-based ``attempt``.

    ``base * multiplier**attempt`` capped at ``max_delay``, then +/- ``jitter``
    of that value. The result never exceeds ``max_delay`` and is never
    negative.
    """
    capped = min(policy.base_delay * (policy.multiplier ** max(attempt, 0)), policy.max_delay)
    spread = capped * policy.jitter * (rand() * 2 - 1)
    return max(0.0, min(capped + spread, policy.max_delay))


def parse_retry_after(value: Optional[str], now: Optional[datetime] = None) -> Optional[float]:
    """Parse a ``Retry-After`` header value into seconds.

    Accepts delta-seconds (``"30"``) or an HTTP date. Dates in the past yield
    ``0.0``. Unparseable values yield ``None``.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return max(0.0, float(text))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    return max(0.0, (when - current).total_seconds())


__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "next_delay",
    "parse_retry_after",
]
