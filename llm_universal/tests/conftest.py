"""Pytest configuration for the llm_universal test suite.

Resets process-level caches (settings, pooled clients) around every test and
provides an ``events`` fixture that captures telemetry through the public
event-hook API.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterator, List

import pytest

from llm_universal.base.http.client import close_all_clients
from llm_universal.base.logging import add_event_hook, remove_event_hook
from llm_universal.config.settings import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Re-read environment settings for each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(scope="session", autouse=True)
def close_clients_after_session() -> Iterator[None]:
    yield
    asyncio.run(close_all_clients())


@pytest.fixture()
def events() -> Iterator[List[Dict[str, Any]]]:
    """Collect every telemetry event emitted during the test."""
    captured: List[Dict[str, Any]] = []
    add_event_hook(captured.append)
    yield captured
    remove_event_hook(captured.append)


@pytest.fixture()
def chat_data() -> Dict[str, Any]:
    return {
        "provider": "openai",
        "apiKey": "sk-test",
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "Hello"}],
    }
