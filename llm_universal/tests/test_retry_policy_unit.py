from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

from llm_universal.base.resilience.retry import RetryPolicy, next_delay, parse_retry_after


def test_backoff_grows_then_caps():
    policy = RetryPolicy(max_retries=6, base_delay=1.0, max_delay=10.0, multiplier=2.0, jitter=0.25)
    no_jitter = [next_delay(n, policy, rand=lambda: 0.5) for n in range(6)]
    assert no_jitter == [1.0, 2.0, 4.0, 8.0, 10.0, 10.0]  # nosec B101 - asserts are appropriate in unit tests


def test_jitter_bounds_and_cap():
    policy = RetryPolicy(base_delay=1.0, max_delay=10.0, jitter=0.25)
    assert next_delay(0, policy, rand=lambda: 0.0) == 0.75  # nosec B101
    assert next_delay(0, policy, rand=lambda: 1.0) == 1.25  # nosec B101
    # upward jitter never exceeds the cap
    assert next_delay(10, policy, rand=lambda: 1.0) == 10.0  # nosec B101
    assert next_delay(10, policy, rand=lambda: 0.0) == 7.5  # nosec B101


def test_delay_never_negative():
    policy = RetryPolicy(base_delay=1.0, max_delay=10.0, jitter=2.0)
    assert next_delay(0, policy, rand=lambda: 0.0) == 0.0  # nosec B101


def test_max_attempts_is_retries_plus_one():
    assert RetryPolicy().max_attempts == 4  # nosec B101
    assert RetryPolicy(max_retries=0).max_attempts == 1  # nosec B101


def test_parse_retry_after_seconds_and_dates():
    assert parse_retry_after("30") == 30.0  # nosec B101
    assert parse_retry_after("1.5") == 1.5  # nosec B101
    assert parse_retry_after(None) is None  # nosec B101
    assert parse_retry_after("soon") is None  # nosec B101

    now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    later = format_datetime(now + timedelta(seconds=45), usegmt=True)
    earlier = format_datetime(now - timedelta(seconds=45), usegmt=True)
    assert parse_retry_after(later, now=now) == 45.0  # nosec B101
    assert parse_retry_after(earlier, now=now) == 0.0  # nosec B101
