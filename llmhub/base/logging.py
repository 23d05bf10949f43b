"""Structured logging for llmhub.

Every module logs through a child of the ``llmhub`` logger. The base logger
owns one console handler (JSON by default) and never propagates to the root
logger, so an embedding application sees llmhub output only where it asks for
it.

Events are single-line JSON objects built by :func:`log_event`:

    {"event": "stream.end", "provider": "deepseek", "model": "...", ...}

:func:`normalized_log_event` adds the keys shared by every request and stream
finalization event (``phase``, ``error_code``, ``emitted`` and ``tokens``,
``null`` when not applicable) so consumers can filter on one schema. API keys never reach
these helpers; callers pass only provider/model context.

Level selection: ``LLMHUB_LOG_LEVEL`` (read on each :func:`get_logger` call)
unless :func:`configure_logger` was given an explicit level.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "llmhub"
LOG_LEVEL_ENV = "LLMHUB_LOG_LEVEL"

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LEVELS: Mapping[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# marker attributes set on the base logger and on the handlers it manages
_READY = "_llmhub_logger_initialized"
_PINNED = "_llmhub_level_pinned"
_CONSOLE = "_llmhub_console_handler"
_FILE = "_llmhub_file_handler"

# 10MB x 5 backups
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name (any case) to its number; ``default`` when unknown."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _managed(logger: logging.Logger, marker: str) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, marker, False)]


def _refresh_console(handler: logging.Handler, level: int, json_mode: bool) -> None:
    handler.setLevel(level)
    # capture tools (pytest capsys) swap sys.stderr between runs
    if isinstance(handler, logging.StreamHandler) and handler.stream is not sys.stderr:
        if getattr(handler.stream, "closed", False):
            # setStream would flush the closed stream first
            with handler.lock:
                handler.stream = sys.stderr
        else:
            handler.setStream(sys.stderr)
    if json_mode != isinstance(handler.formatter, JsonFormatter):
        handler.setFormatter(_formatter(json_mode))


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Return the ``llmhub`` logger, installing its console handler once."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)

    if not getattr(logger, _READY, False):
        console = logging.StreamHandler(sys.stderr)
        setattr(console, _CONSOLE, True)
        console.setFormatter(_formatter(json_mode))
        logger.handlers[:] = [console]
        logger.propagate = False
        logger.setLevel(env_level)
        console.setLevel(env_level)
        setattr(logger, _READY, True)
        return logger

    if not getattr(logger, _PINNED, False):
        logger.setLevel(env_level)
    for console in _managed(logger, _CONSOLE):
        _refresh_console(console, logger.level, json_mode)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``llmhub`` or one of its children.

    Names outside the hierarchy are prefixed (``"client"`` becomes
    ``"llmhub.client"``). Children have no handlers and inherit the base
    logger's level.
    """
    base = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    qualified = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(qualified)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def _close_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(OSError):
        handler.close()


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Numeric level or level name. When ``None``, the current level is
        preserved. An explicit level stays in effect (over
        ``LLMHUB_LOG_LEVEL``) until reconfigured.
    file_path: Optional[str]
        Attach a rotating file handler writing to this path (parent
        directories are created). ``None`` detaches any file handler added
        by an earlier call.
    json_mode: bool
        JSON (default) or plain text formatting for the managed handlers.

    Returns
    -------
    logging.Logger
        The base ``llmhub`` logger.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)

    if level is not None:
        numeric = _parse_level(level, default=logger.level) if isinstance(level, str) else int(level)
        logger.setLevel(numeric)
        setattr(logger, _PINNED, True)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    current: Optional[logging.Handler] = None
    for handler in _managed(logger, _FILE):
        if target is not None and getattr(handler, "baseFilename", None) == target:
            current = handler
        else:
            _close_handler(logger, handler)
    if target is None:
        return logger

    if current is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        current = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(current, _FILE, True)
        logger.addHandler(current)
    current.setLevel(logger.level)
    current.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as one JSON object.

    The object holds ``event``, then the context keys, then ``fields``.
    ``None`` values in ``fields`` are dropped unless ``keep_none`` is set.
    Nothing is serialized when ``level`` is disabled.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "phase",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    if hasattr(tokens, "model_dump"):
        return tokens.model_dump(exclude_none=True)
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log a finalization event carrying the normalized key set.

    Every key of ``REQUIRED_NORMALIZED_KEYS`` is present; ``error_code`` is
    ``null`` on success and ``emitted``/``tokens`` may be ``null`` when
    unknown. ``extra_fields`` cannot overwrite them and ``None`` extras are
    dropped.
    """
    fields: Dict[str, Any] = {
        "phase": phase,
        "error_code": error_code,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    fields.update({k: v for k, v in extra_fields.items() if v is not None and k not in fields})
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
]
