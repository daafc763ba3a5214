"""Shared async HTTP client pool.

Purpose:
    Provide a lock-guarded cache of reusable ``httpx.AsyncClient`` instances so
    repeated requests share connection pools.

Timeout strategy:
    Clients carry the library ceiling as a transport timeout only. The
    execution engine enforces the real per-attempt deadline with
    ``asyncio.wait_for``.

Lifecycle:
    Clients are cached by ``purpose``. Call :func:`close_all_clients` from
    application shutdown or test teardown.
"""

from __future__ import annotations

import threading
from typing import Dict

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[str, httpx.AsyncClient] = {}
_LOCK = threading.RLock()


def get_async_client(purpose: str = "default") -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for ``purpose``.

    Redirects are not followed by the client; the execution engine walks
    them hop by hop so every target is URL-checked.
    """
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None and not client.is_closed:
            return client
        cfg = get_timeout_config()
        client = httpx.AsyncClient(
            timeout=cfg.max_seconds,
            follow_redirects=False,
        )
        _CLIENTS[purpose] = client
        return client


def pooled_client_count() -> int:
    with _LOCK:
        return len(_CLIENTS)


async def close_all_clients() -> None:
    """Close and clear all pooled clients."""
    with _LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for c in clients:
        await c.aclose()


__all__ = ["get_async_client", "close_all_clients", "pooled_client_count"]
