"""Retry policy and backoff helpers."""

from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, next_delay, parse_retry_after

__all__ = ["DEFAULT_RETRY_POLICY", "RetryPolicy", "next_delay", "parse_retry_after"]
