"""Rate-limit table helpers: header parsing, tier lookup, table loading."""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

import httpx
import yaml

from ...config.rate_limits import (
    PROVIDER_RATE_LIMITS,
    RATE_LIMIT_DOCUMENTATION,
    RATE_LIMIT_HEADERS,
    RPD,
    RPM,
    TPD,
    TPM,
)
from ..errors import ConfigurationError
from ..resilience.retry import parse_retry_after

_SHORT_KEYS = {"rpm": RPM, "tpm": TPM, "rpd": RPD, "tpd": TPD}


def _int_header(headers: httpx.Headers, name: str) -> Optional[int]:
    raw = headers.get(name)
    if raw is None:
        return None
    try:
        return int(float(raw))
    except ValueError:
        return None


def parse_rate_limit_headers(headers: Mapping[str, str], provider: str) -> Dict[str, Any]:
    """Extract provider-reported rate-limit state from response headers.

    Returns only the values present; unknown providers yield ``{}``.
    """
    h = httpx.Headers(headers)
    info: Dict[str, Any] = {}
    for key, name in RATE_LIMIT_HEADERS.get(provider, {}).items():
        if key == "retry_after":
            info[key] = parse_retry_after(h.get(name))
        elif key == "reset":
            info[key] = h.get(name)
        else:
            info[key] = _int_header(h, name)
    return {k: v for k, v in info.items() if v is not None}


def _max_bound(value: Any) -> Optional[int]:
    if isinstance(value, Mapping):
        bounds = [v for v in value.values() if v is not None]
        return max(bounds) if bounds else None
    return value


def recommended_tier(
    provider: str,
    requirements: Mapping[str, int],
    limits: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None,
) -> str:
    """Return the first tier whose bounds satisfy ``requirements``.

    ``requirements`` uses short keys (``rpm``, ``tpm``, ``rpd``, ``tpd``).
    Unconstrained bounds satisfy any requirement. Falls back to the last
    listed tier, or ``"unknown"`` for providers without a table.
    """
    table = PROVIDER_RATE_LIMITS if limits is None else limits
    tiers = table.get(provider)
    if not tiers:
        return "unknown"
    for name, bounds in tiers.items():
        ok = True
        for short, key in _SHORT_KEYS.items():
            need = requirements.get(short)
            have = _max_bound(bounds.get(key))
            if need and have is not None and have < need:
                ok = False
                break
        if ok:
            return name
    return list(tiers)[-1]


def provider_documentation(provider: str) -> Optional[str]:
    """Return the rate-limit documentation URL for ``provider``."""
    return RATE_LIMIT_DOCUMENTATION.get(provider)


def _normalize_bounds(provider: str, tier: str, bounds: Any) -> Dict[str, Any]:
    if not isinstance(bounds, Mapping):
        raise ConfigurationError(
            provider, "invalid_rate_limit_table", f"Tier '{tier}' for {provider} must be a mapping"
        )
    return {_SHORT_KEYS.get(k, k): v for k, v in bounds.items()}


def load_rate_limit_table(path: str) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Load a provider -> tier -> bounds table from a JSON or YAML file.

    Bounds may use the long names (``requests_per_minute``) or short ones
    (``rpm``). Providers absent from the file keep no entry; merge with
    :data:`PROVIDER_RATE_LIMITS` at the call site when a partial override is
    wanted.

    Raises:
        ConfigurationError: ``issue="invalid_rate_limit_table"`` when the file
            cannot be read or does not have the expected shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if os.path.splitext(path)[1].lower() in (".yaml", ".yml"):
                raw = yaml.safe_load(fh)
            else:
                raw = json.load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            "rate_limits", "invalid_rate_limit_table", f"Cannot load rate limit table {path}: {exc}", cause=exc
        ) from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError("rate_limits", "invalid_rate_limit_table", f"{path} must contain a mapping")
    table: Dict[str, Dict[str, Dict[str, Any]]] = {}
    for provider, tiers in raw.items():
        if not isinstance(tiers, Mapping):
            raise ConfigurationError(
                str(provider), "invalid_rate_limit_table", f"Tiers for {provider} must be a mapping"
            )
        table[str(provider)] = {str(t): _normalize_bounds(provider, t, b) for t, b in tiers.items()}
    return table


__all__ = [
    "parse_rate_limit_headers",
    "recommended_tier",
    "provider_documentation",
    "load_rate_limit_table",
]
