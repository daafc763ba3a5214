"""Request security controls: API key sanitization and URL validation.

Purpose:
    Both checks run for every request before anything is sent. A failure is a
    caller or configuration problem and surfaces as :class:`ConfigurationError`
    which the execution engine never retries.

Notes:
    - Key material is never logged; rejection events carry only the provider,
      the issue and (for short keys) the observed length.
    - The loopback/private-network exemption is scoped to exactly one provider
      id (:data:`~llm_universal.config.defaults.LOCAL_PROVIDER`).
"""
from __future__ import annotations

import ipaddress
import logging
import re
from typing import Optional

import httpx

from ..config.defaults import LOCAL_PROVIDER
from ..config.settings import get_settings
from .errors import ConfigurationError
from .logging import get_logger, log_event

_LOG = get_logger("llm_universal.security")

_CONTROL_CHARS = re.compile(r"[\r\n\t]")
_ALLOWED_SCHEMES = frozenset({"http", "https"})


def _reject(provider: str, issue: str, message: str, **fields) -> ConfigurationError:
    log_event(_LOG, "security.rejected", level=logging.WARNING, provider=provider, issue=issue, **fields)
    return ConfigurationError(provider, issue, message)


def sanitize_api_key(key: Optional[str], provider: str, min_length: Optional[int] = None) -> str:
    """Return ``key`` stripped of header-injection characters.

    ``\\r``, ``\\n`` and ``\\t`` are removed anywhere in the key, then
    surrounding whitespace is trimmed. Empty or too-short keys are rejected.

    Raises:
        ConfigurationError: ``issue="invalid_api_key"`` when the key is not a
            string, is empty after sanitization, or is shorter than
            ``min_length`` (settings default when ``None``).
    """
    floor = get_settings().min_api_key_length if min_length is None else min_length
    if not isinstance(key, str):
        raise _reject(provider, "invalid_api_key", f"API key for {provider} must be a string")
    cleaned = _CONTROL_CHARS.sub("", key).strip()
    if not cleaned:
        raise _reject(provider, "invalid_api_key", f"API key for {provider} is empty")
    if len(cleaned) < floor:
        raise _reject(
            provider,
            "invalid_api_key",
            f"API key for {provider} is malformed (shorter than {floor} characters)",
            length=len(cleaned),
        )
    return cleaned


def _is_local_host(host: str) -> bool:
    lowered = host.lower().rstrip(".")
    if lowered == "localhost" or lowered.endswith(".localhost"):
        return True
    try:
        addr = ipaddress.ip_address(lowered)
    except ValueError:
        return False
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    return (
        addr.is_loopback
        or addr.is_private
        or addr.is_link_local
        or addr.is_reserved
        or addr.is_unspecified
        or addr.is_multicast
    )


def validate_url(url: str, provider: str) -> str:
    """Validate a resolved or caller-supplied URL and return it unchanged.

    Only ``http``/``https`` with a host are accepted. Loopback, private,
    link-local and reserved hosts (IPv4, IPv6 and ``localhost``) are rejected
    unless ``provider`` is the local inference provider.

    Raises:
        ConfigurationError: ``issue="disallowed_url"``.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise _reject(provider, "disallowed_url", f"Invalid URL for {provider}: {exc}") from exc
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise _reject(
            provider,
            "disallowed_url",
            f"URL scheme '{parsed.scheme}' is not allowed for {provider}",
            scheme=parsed.scheme,
        )
    host = parsed.host
    if not host:
        raise _reject(provider, "disallowed_url", f"URL for {provider} has no host")
    if provider != LOCAL_PROVIDER and _is_local_host(host):
        raise _reject(
            provider,
            "disallowed_url",
            f"Private or loopback address '{host}' is not allowed for {provider}",
            host=host,
        )
    return url


__all__ = ["sanitize_api_key", "validate_url"]
