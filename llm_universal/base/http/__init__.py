"""HTTP helpers (shared async client pool)."""

from .client import close_all_clients, get_async_client, pooled_client_count

__all__ = ["get_async_client", "close_all_clients", "pooled_client_count"]
