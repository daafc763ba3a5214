"""Base structured logging utilities.

Rationale:
- Central place to configure consistent JSON (or plain) logging.
- Telemetry events (``request.start``, ``request.retry`` ...) are emitted
  through ``log_event`` as one JSON line each.
- External collaborators subscribe with ``add_event_hook`` and receive every
  event as a dict; how they persist or display it is their concern.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from typing import Any, Callable, Dict, List, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "llm_universal"
LOG_LEVEL_ENV = "LLM_UNIVERSAL_LOG_LEVEL"

_BASE_LOGGER_ATTR = "_llm_universal_logger_initialized"
_FILE_HANDLER_ATTR = "_llm_universal_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

EventHook = Callable[[Dict[str, Any]], None]
_HOOKS: List[EventHook] = []
_HOOKS_LOCK = threading.Lock()


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level name case-insensitively, falling back to ``default``."""
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize and return the shared package logger."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        return logger
    desired = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    logger.setLevel(desired)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired)
    handler.setFormatter(_formatter(json_mode))
    logger.addHandler(handler)
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the package logger or a child that propagates to it."""
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    if not name.startswith(f"{BASE_LOGGER_NAME}."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(name)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level:
        Numeric level or name (e.g. ``"DEBUG"``). ``None`` keeps the current level.
    file_path:
        When given, attach (or reuse) a rotating file handler writing to it.
        When ``None``, remove any file handler previously attached here.
    json_mode:
        JSON formatter (default) or plain text for the file handler.
    """
    logger = get_logger(json_mode=json_mode)
    if level is not None:
        resolved = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(resolved)
        for h in logger.handlers:
            h.setLevel(resolved)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    if file_path is None:
        for h in managed:
            logger.removeHandler(h)
            with contextlib.suppress(OSError):
                h.close()
        return logger

    abs_path = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    existing: Optional[logging.FileHandler] = None
    for h in managed:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == abs_path:
            existing = h
        else:
            logger.removeHandler(h)
            with contextlib.suppress(OSError):
                h.close()

    if existing is None:
        # 10MB x 5 backups
        existing = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(existing, _FILE_HANDLER_ATTR, True)
        logger.addHandler(existing)
    existing.setFormatter(_formatter(json_mode))
    existing.setLevel(logger.level)
    return logger


def add_event_hook(hook: EventHook) -> None:
    """Subscribe ``hook`` to every telemetry event dict."""
    with _HOOKS_LOCK:
        _HOOKS.append(hook)


def remove_event_hook(hook: EventHook) -> None:
    """Unsubscribe ``hook``; unknown hooks are ignored."""
    with _HOOKS_LOCK:
        if hook in _HOOKS:
            _HOOKS.remove(hook)


def _dispatch(logger: logging.Logger, payload: Dict[str, Any]) -> None:
    with _HOOKS_LOCK:
        hooks = list(_HOOKS)
    for hook in hooks:
        try:
            hook(dict(payload))
        except Exception:  # hook failures must not break the request path
            logger.exception("event hook %r failed", hook)


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> Dict[str, Any]:
    """Emit a structured event and fan it out to registered hooks.

    Parameters
    ----------
    logger:
        Logger obtained from ``get_logger``.
    event:
        Event name (e.g. ``request.retry``).
    ctx:
        Request context merged shallowly into the payload.
    level:
        Logging level for the emitted line.
    keep_none:
        Preserve keys whose values are ``None``.

    Returns
    -------
    dict
        The emitted payload.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    if logger.isEnabledFor(level):
        logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
    _dispatch(logger, payload)
    return payload


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "add_event_hook",
    "remove_event_hook",
]
