"""Execution engine: retries, timeouts, rate-limit pre-check and telemetry.

All HTTP goes through ``httpx.MockTransport``; delays go through a recording
fake ``sleep`` so no test waits on real backoff.
"""

from __future__ import annotations

import asyncio
import json
from typing import List

import httpx
import pytest

from llm_universal.base.engine import ExecutionEngine, ExecutionState, execute_request, usage_tokens
from llm_universal.base.errors import (
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    ProviderTimeoutError,
    RateLimitError,
    RequestValidationError,
    ServiceError,
)
from llm_universal.base.rate_limits import RateLimitTracker
from llm_universal.base.resilience.retry import RetryPolicy
from llm_universal.base.timeouts import TimeoutConfig
from llm_universal.config.rate_limits import RPM


class Scripted:
    """Mock handler replaying a list of statuses (or exceptions)."""

    def __init__(self, script, body=None, headers=None):
        self.script = list(script)
        self.body = body or {"id": "resp-1", "usage": {"total_tokens": 42}}
        self.headers = headers or {}
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, Exception):
            raise step
        body = self.body if step < 400 else {"error": {"message": f"status {step}"}}
        return httpx.Response(step, json=body, headers=self.headers if step == 429 else None)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _states(events):
    return [e["state"] for e in events if e["event"] == "engine.state"]


def _engine(handler, sleeps, **kw):
    async def fake_sleep(delay):
        sleeps.append(delay)

    kw.setdefault("retry_policy", RetryPolicy(max_retries=3, base_delay=1.0, max_delay=10.0))
    return ExecutionEngine(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sleep=fake_sleep,
        rand=lambda: 0.5,
        **kw,
    )


def test_round_trip_scenario(chat_data, events):
    handler = Scripted([200])
    sleeps: List[float] = []
    engine = _engine(handler, sleeps)
    response = asyncio.run(engine.execute(chat_data))
    assert response.status_code == 200  # nosec B101
    sent = handler.requests[0]
    assert sent.url.path == "/v1/chat/completions"  # nosec B101
    assert sent.headers["authorization"] == "Bearer sk-test"  # nosec B101
    body = json.loads(sent.content)
    assert body == {"model": "gpt-4o", "messages": [{"role": "user", "content": "Hello"}]}  # nosec B101
    assert _states(events) == ["validating", "building", "sending", "succeeded"]  # nosec B101
    assert sleeps == []  # nosec B101


def test_transient_failures_are_retried(chat_data, events):
    handler = Scripted([503, 503, 200])
    sleeps: List[float] = []
    engine = _engine(handler, sleeps)
    response = asyncio.run(engine.execute(chat_data))
    assert response.status_code == 200  # nosec B101
    assert len(handler.requests) == 3  # nosec B101
    assert sleeps == [1.0, 2.0]  # nosec B101
    names = [e["event"] for e in events if not e["event"].startswith("engine.")]
    assert names == [  # nosec B101
        "request.start",
        "request.error",
        "request.retry",
        "request.error",
        "request.retry",
        "request.success",
    ]
    success = events[-2] if events[-1]["event"] == "engine.state" else events[-1]
    assert success["attempt"] == 3 and success["usage"] == {"total_tokens": 42}  # nosec B101


def test_non_retryable_fails_after_one_attempt(chat_data, events):
    handler = Scripted([401])
    sleeps: List[float] = []
    engine = _engine(handler, sleeps)
    with pytest.raises(AuthenticationError):
        asyncio.run(engine.execute(chat_data))
    assert len(handler.requests) == 1  # nosec B101
    assert sleeps == []  # nosec B101
    assert _states(events)[-1] == ExecutionState.FAILED.value  # nosec B101


def test_attempt_ceiling_surfaces_last_error(chat_data):
    handler = Scripted([502])
    sleeps: List[float] = []
    engine = _engine(handler, sleeps)
    with pytest.raises(ServiceError) as ei:
        asyncio.run(engine.execute(chat_data))
    assert ei.value.status_code == 502  # nosec B101
    assert ei.value.cause.response.status_code == 502  # nosec B101
    assert ei.value.__cause__ is ei.value.cause  # nosec B101
    assert len(handler.requests) == 4  # nosec B101
    assert sleeps == [1.0, 2.0, 4.0]  # nosec B101


def test_retry_after_takes_precedence(chat_data):
    handler = Scripted([429, 200], headers={"Retry-After": "7"})
    sleeps: List[float] = []
    engine = _engine(handler, sleeps)
    asyncio.run(engine.execute(chat_data))
    assert sleeps == [7.0]  # nosec B101


def test_transport_errors_are_classified(chat_data):
    handler = Scripted([httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), 200])
    sleeps: List[float] = []
    assert asyncio.run(_engine(handler, sleeps).execute(chat_data)).status_code == 200  # nosec B101

    handler = Scripted([httpx.ConnectError("refused")])
    engine = _engine(handler, [], retry_policy=RetryPolicy(max_retries=0))
    with pytest.raises(NetworkError):
        asyncio.run(engine.execute(chat_data))


def test_per_attempt_timeout(chat_data):
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={})

    engine = _engine(
        slow,
        [],
        retry_policy=RetryPolicy(max_retries=0),
        timeouts=TimeoutConfig(default_seconds=30.0, max_seconds=120.0),
    )
    with pytest.raises(ProviderTimeoutError) as ei:
        asyncio.run(engine.execute(chat_data, timeout=0.01))
    assert ei.value.timeout == 0.01  # nosec B101


def test_validation_and_configuration_fail_before_sending(chat_data, events):
    handler = Scripted([200])
    engine = _engine(handler, [])
    with pytest.raises(RequestValidationError):
        asyncio.run(engine.execute({**chat_data, "temperature": 9}))
    with pytest.raises(ConfigurationError):
        asyncio.run(engine.execute({k: v for k, v in chat_data.items() if k != "apiKey"}))
    with pytest.raises(ConfigurationError):
        asyncio.run(engine.execute(chat_data, url="http://10.0.0.1/v1/chat/completions"))
    assert handler.requests == []  # nosec B101
    assert "sending" not in _states(events)  # nosec B101
    assert _states(events)[-1] == ExecutionState.FAILED.value  # nosec B101


def test_rate_limit_precheck_raises_when_wait_too_long(chat_data):
    clock = FakeClock()
    tracker = RateLimitTracker({"openai": {"t": {RPM: 1}}}, clock=clock)
    tracker.record("openai")
    handler = Scripted([200])
    engine = _engine(handler, [], tracker=tracker, tier="t")
    with pytest.raises(RateLimitError) as ei:
        asyncio.run(engine.execute(chat_data))
    assert ei.value.retry_after == pytest.approx(60.0)  # nosec B101
    assert ei.value.status_code is None  # nosec B101
    assert handler.requests == []  # nosec B101


def test_rate_limit_precheck_sleeps_when_wait_fits(chat_data, events):
    clock = FakeClock()
    tracker = RateLimitTracker({"openai": {"t": {RPM: 1}}}, clock=clock)
    tracker.record("openai")
    clock.now += 55
    handler = Scripted([200])
    sleeps: List[float] = []
    engine = _engine(handler, sleeps, tracker=tracker, tier="t")
    asyncio.run(engine.execute(chat_data))
    assert sleeps == [pytest.approx(5.0)]  # nosec B101
    assert len(handler.requests) == 1  # nosec B101
    assert any(e["event"] == "rate_limit.wait" for e in events)  # nosec B101


def test_each_attempt_is_recorded_with_usage_tokens(chat_data):
    clock = FakeClock()
    tracker = RateLimitTracker({}, clock=clock)
    handler = Scripted([503, 200])
    engine = _engine(handler, [], tracker=tracker)
    asyncio.run(engine.execute(chat_data))
    stats = tracker.get_usage_stats("openai")
    assert stats["requests_last_minute"] == 2  # nosec B101
    assert stats["tokens_last_minute"] == 42  # nosec B101


def test_usage_tokens_variants():
    assert usage_tokens({"total_tokens": 5}) == 5  # nosec B101
    assert usage_tokens({"input_tokens": 3, "output_tokens": 4}) == 7  # nosec B101
    assert usage_tokens({"totalTokenCount": 9}) == 9  # nosec B101
    assert usage_tokens(None) == 0  # nosec B101


def test_execute_request_with_explicit_engine(chat_data):
    handler = Scripted([200])
    engine = _engine(handler, [])
    response = asyncio.run(execute_request(chat_data, engine=engine))
    assert response.json()["id"] == "resp-1"  # nosec B101


def test_cancellation_propagates(chat_data):
    async def hang(request):
        await asyncio.sleep(10)
        return httpx.Response(200)

    engine = _engine(hang, [])

    async def run():
        task = asyncio.create_task(engine.execute(chat_data))
        await asyncio.sleep(0.01)
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(run())


class Redirecting:
    """Answer the provider host with a redirect to ``location``."""

    def __init__(self, location, status=307, hops=1):
        self.location = location
        self.status = status
        self.hops = hops
        self.requests: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        if len(self.requests) <= self.hops:
            return httpx.Response(self.status, headers={"Location": self.location})
        return httpx.Response(200, json={"id": "moved", "usage": {"total_tokens": 1}})


def test_redirect_to_loopback_is_rejected(chat_data, events):
    handler = Redirecting("http://127.0.0.1:8080/internal", status=302)
    engine = _engine(handler, [])
    with pytest.raises(ConfigurationError) as ei:
        asyncio.run(engine.execute(chat_data))
    assert ei.value.issue == "disallowed_url"  # nosec B101
    assert handler.requests == ["https://api.openai.com/v1/chat/completions"]  # nosec B101
    assert any(e["event"] == "security.rejected" for e in events)  # nosec B101
    assert _states(events)[-1] == ExecutionState.FAILED.value  # nosec B101


def test_redirect_to_public_host_is_followed(chat_data):
    handler = Redirecting("https://eu.api.openai.com/v1/chat/completions")
    response = asyncio.run(_engine(handler, []).execute(chat_data))
    assert response.json()["id"] == "moved"  # nosec B101
    assert handler.requests[-1] == "https://eu.api.openai.com/v1/chat/completions"  # nosec B101


def test_redirect_hops_are_bounded(chat_data):
    handler = Redirecting("https://api.openai.com/v1/chat/completions", hops=10)
    engine = _engine(handler, [], retry_policy=RetryPolicy(max_retries=0))
    with pytest.raises(NetworkError) as ei:
        asyncio.run(engine.execute(chat_data))
    assert isinstance(ei.value.cause, httpx.TooManyRedirects)  # nosec B101
    assert len(handler.requests) == 4  # nosec B101


def test_shared_engine_keeps_state_per_call(chat_data, events):
    handler = Scripted([503, 200])
    engine = _engine(handler, [])

    async def run_both():
        return await asyncio.gather(engine.execute(chat_data), engine.execute(chat_data))

    first, second = asyncio.run(run_both())
    assert first.status_code == 200 and second.status_code == 200  # nosec B101
    per_call = {}
    for e in events:
        if e["event"] == "engine.state":
            per_call.setdefault(e["request_id"], []).append(e["state"])
    assert len(per_call) == 2  # nosec B101
    assert all(states[-1] == "succeeded" for states in per_call.values())  # nosec B101
