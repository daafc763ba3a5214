"""Async execution engine: timeouts, retry with backoff, rate-limit pre-check.

Purpose:
    Execute one logical request against a provider and return either the raw
    successful ``httpx.Response`` or exactly one :class:`LLMError`.

Flow per call:
    Idle -> Validating -> Building -> (Sending -> Retrying)* -> Succeeded | Failed

Notes:
    - Attempts are strictly sequential; ``max_retries`` retries means at most
      ``max_retries + 1`` sends.
    - Validation and configuration failures are raised before anything is sent
      and never retried.
    - ``Retry-After`` from a rate-limited response takes precedence over the
      computed backoff.
    - Cancelling the awaiting task cancels the in-flight attempt or sleep;
      ``asyncio.CancelledError`` is never converted into a typed error.
    - Redirects are followed by the engine itself, up to ``MAX_REDIRECTS``
      hops, and every target passes the same URL check as the first hop.
    - Execution state is per call and reported through ``engine.state``
      events; an engine can be shared by concurrent callers.
"""
from __future__ import annotations

import asyncio
import json
import logging
import random
import time
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from ..config.defaults import MAX_REDIRECTS
from ..config.settings import Settings, get_settings
from .assembler import create_request
from .errors import LLMError, RateLimitError, classify_failure
from .http.client import get_async_client
from .logging import LogContext, get_logger, log_event
from .models import RequestDescriptor
from .rate_limits import RateLimitTracker
from .resilience.retry import RetryPolicy, next_delay
from .security import validate_url
from .timeouts import TimeoutConfig
from .validation import validate_request

_LOG = get_logger("llm_universal.engine")

Sleep = Callable[[float], Awaitable[Any]]


class ExecutionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BUILDING = "building"
    SENDING = "sending"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def retry_policy_from_settings(settings: Settings | None = None) -> RetryPolicy:
    """Build a :class:`RetryPolicy` from operational settings."""
    s = settings or get_settings()
    return RetryPolicy(
        max_retries=s.max_retries,
        base_delay=s.retry_base_delay,
        max_delay=s.retry_max_delay,
    )


def usage_of(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Return the ``usage`` block of a JSON response body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    usage = body.get("usage") or body.get("usageMetadata")
    return usage if isinstance(usage, dict) else None


def usage_tokens(usage: Optional[Mapping[str, Any]]) -> int:
    """Total tokens reported in a usage block (0 when unknown)."""
    if not usage:
        return 0
    for key in ("total_tokens", "totalTokenCount"):
        value = usage.get(key)
        if isinstance(value, (int, float)):
            return int(value)
    parts = [usage.get("input_tokens"), usage.get("output_tokens")]
    return int(sum(p for p in parts if isinstance(p, (int, float))))


class ExecutionEngine:
    """Execute canonical requests with bounded retries.

    Args:
        tracker: Optional rate-limit tracker consulted before each attempt and
            updated after each send.
        retry_policy: Backoff configuration; built from settings when omitted.
        timeouts: Per-attempt timeout configuration; from settings when omitted.
        client: ``httpx.AsyncClient`` to send with; the shared pool otherwise.
        sleep: Awaitable used for every delay (inject a fake in tests).
        tier: Rate-limit tier; ``None`` uses the provider's first listed tier.
        rand: Random source for backoff jitter.
    """

    def __init__(
        self,
        tracker: Optional[RateLimitTracker] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeouts: Optional[TimeoutConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
        tier: Optional[str] = None,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self.tracker = tracker
        self.retry_policy = retry_policy or retry_policy_from_settings()
        self.timeouts = timeouts or TimeoutConfig.from_settings()
        self._client = client
        self._sleep = sleep
        self.tier = tier
        self._rand = rand

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client if self._client is not None else get_async_client("engine")

    def _transition(self, state: ExecutionState, ctx: LogContext, **fields: Any) -> None:
        log_event(_LOG, "engine.state", ctx, level=logging.DEBUG, state=state.value, **fields)

    async def _send(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send one attempt, following redirects only to allowed URLs.

        Raises:
            ConfigurationError: a redirect target fails URL validation.
            httpx.TooManyRedirects: more than ``MAX_REDIRECTS`` hops.
        """
        response = await self.client.request(
            descriptor.method,
            descriptor.url,
            headers=descriptor.headers,
            json=descriptor.body,
            follow_redirects=False,
        )
        hops = 0
        while response.next_request is not None:
            target = response.next_request
            await response.aclose()
            if hops >= MAX_REDIRECTS:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=target)
            validate_url(str(target.url), descriptor.provider)
            response = await self.client.send(target, follow_redirects=False)
            hops += 1
        return response

    async def _precheck(self, ctx: LogContext, tokens: int) -> None:
        if self.tracker is None:
            return
        decision = self.tracker.check(ctx.provider, self.tier, tokens, ctx.model)
        if decision.allowed:
            return
        if decision.wait_time <= self.retry_policy.max_delay:
            log_event(
                _LOG,
                "rate_limit.wait",
                ctx,
                level=logging.WARNING,
                wait_seconds=round(decision.wait_time, 3),
                reason=decision.reason,
            )
            await self._sleep(decision.wait_time)
            return
        raise RateLimitError(
            ctx.provider,
            retry_after=decision.wait_time,
            message=f"Local rate limit for {ctx.provider}: {decision.reason}",
            status_code=None,
        )

    async def execute(
        self,
        data: Any,
        *,
        mode: str = "chat",
        url: Optional[str] = None,
        method: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        min_api_key_length: Optional[int] = None,
        estimated_tokens: int = 0,
    ) -> httpx.Response:
        """Send the request and return the raw successful response.

        Raises:
            LLMError: the classified failure of the last attempt, or a
                validation/configuration/local rate-limit error raised before
                any send.
        """
        ctx = LogContext(request_id=uuid.uuid4().hex[:12], mode=mode)
        try:
            self._transition(ExecutionState.VALIDATING, ctx)
            req = validate_request(data)
            ctx.provider, ctx.model = req.provider, req.model
            self._transition(ExecutionState.BUILDING, ctx)
            descriptor = create_request(
                req, mode=mode, url=url, method=method, headers=headers, min_api_key_length=min_api_key_length
            )
        except LLMError as exc:
            self._transition(ExecutionState.FAILED, ctx, error_kind=exc.kind.value)
            raise
        ctx.mode = descriptor.mode

        per_attempt = self.timeouts.timeout_for(req.provider, timeout)
        log_event(
            _LOG,
            "request.start",
            ctx,
            has_api_key=req.api_key is not None,
            request_size=len(json.dumps(descriptor.body)) if descriptor.body is not None else 0,
            timeout=per_attempt,
        )

        attempts = self.retry_policy.max_attempts
        for attempt in range(attempts):
            try:
                await self._precheck(ctx, estimated_tokens)
            except LLMError as exc:
                self._transition(ExecutionState.FAILED, ctx, error_kind=exc.kind.value)
                raise

            self._transition(ExecutionState.SENDING, ctx, attempt=attempt + 1)
            started = time.perf_counter()
            error: Optional[LLMError] = None
            response: Optional[httpx.Response] = None
            try:
                response = await asyncio.wait_for(self._send(descriptor), timeout=per_attempt)
            except LLMError as exc:
                if self.tracker is not None:
                    self.tracker.record(req.provider, 0)
                self._transition(ExecutionState.FAILED, ctx, error_kind=exc.kind.value)
                raise
            except (asyncio.TimeoutError, httpx.HTTPError) as exc:
                error = classify_failure(
                    exc, req.provider, url=descriptor.url, model=req.model, timeout=per_attempt
                )
            duration_ms = int((time.perf_counter() - started) * 1000)

            if response is not None and response.is_success:
                usage = usage_of(response)
                if self.tracker is not None:
                    self.tracker.record(req.provider, usage_tokens(usage))
                log_event(
                    _LOG,
                    "request.success",
                    ctx,
                    duration_ms=duration_ms,
                    usage=usage,
                    status=response.status_code,
                    attempt=attempt + 1,
                )
                self._transition(ExecutionState.SUCCEEDED, ctx)
                return response

            if error is None:
                error = classify_failure(response, req.provider, url=descriptor.url, model=req.model)
            if self.tracker is not None:
                self.tracker.record(req.provider, 0)
            log_event(
                _LOG,
                "request.error",
                ctx,
                level=logging.WARNING,
                error_kind=error.kind.value,
                status=error.status_code,
                attempt=attempt + 1,
                duration_ms=duration_ms,
                message=error.message,
            )

            if not error.retryable or attempt + 1 >= attempts:
                self._transition(ExecutionState.FAILED, ctx, error_kind=error.kind.value)
                raise error from error.cause

            if isinstance(error, RateLimitError) and error.retry_after is not None:
                delay = error.retry_after
            else:
                delay = next_delay(attempt, self.retry_policy, self._rand)
            self._transition(ExecutionState.RETRYING, ctx, attempt=attempt + 1)
            log_event(
                _LOG,
                "request.retry",
                ctx,
                attempt=attempt + 1,
                delay=round(delay, 3),
                reason=error.message,
            )
            await self._sleep(delay)

        # unreachable: the loop either returns or raises
        raise RuntimeError("retry loop exited without a result")


async def execute_request(data: Any, *, engine: Optional[ExecutionEngine] = None, **options: Any) -> httpx.Response:
    """Execute ``data`` with ``engine`` (a default engine when omitted)."""
    return await (engine or ExecutionEngine()).execute(data, **options)


__all__ = [
    "ExecutionEngine",
    "ExecutionState",
    "execute_request",
    "retry_policy_from_settings",
    "usage_of",
    "usage_tokens",
]
