"""Structured JSON logging shared by every mediaset module.

Modules take a child of the package logger::

    logger = log_mgr.get_logger().getChild("services.lookup.clients.tmdb")

and pass an ``event`` name through ``extra``. Values bound with
:func:`log_context` (or :func:`correlation_scope`) are attached to every
record emitted by the current task, so concurrent lookups keep their own
media type, identifier kind and correlation id.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, List, Optional

LOGGER_NAME = "mediaset"
LOG_DIR_ENV = "MEDIASET_LOG_DIR"
LOG_FILENAME = "mediaset.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DEFAULT_LOG_LEVEL = logging.INFO

_logger: Optional[logging.Logger] = None
_log_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "mediaset_log_context", default={}
)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record.

    Well-known lookup fields are promoted to the top level; other ``extra``
    values are nested under ``"extra"``.
    """

    DEFAULT_FIELDS: tuple[str, ...] = (
        "correlation_id",
        "event",
        "provider",
        "media_type",
        "identifier_kind",
        "status",
        "duration_ms",
    )

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pid": record.process,
            "thread": record.threadName,
        }
        extra: Dict[str, object] = {}
        for key, value in vars(record).items():
            if key in self.DEFAULT_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _RECORD_ATTRIBUTES:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the task's bound context onto records that do not set the key."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _build_handlers() -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_dir = os.environ.get(LOG_DIR_ENV, "").strip()
    if log_dir:
        directory = Path(log_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                directory / LOG_FILENAME,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
            )
        )
    formatter = JSONLogFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_level: int | str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Install JSON handlers on the package logger once and set its level."""
    global _logger

    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        logger.addFilter(LogContextFilter())
        for handler in _build_handlers():
            logger.addHandler(handler)
        _logger = logger
    configure_logging_level(log_level=log_level)
    return _logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(log_level.strip().upper())
    return resolved if isinstance(resolved, int) else DEFAULT_LOG_LEVEL


def configure_logging_level(
    debug_enabled: bool = False, log_level: Optional[int | str] = None
) -> int:
    """Apply ``log_level`` (a number or a name such as ``"debug"``).

    Unknown names fall back to INFO. Without a level, ``debug_enabled``
    chooses between DEBUG and INFO.
    """
    if log_level is not None:
        level = _resolve_level(log_level)
    else:
        level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return level


def get_log_context() -> Dict[str, object]:
    """Return a copy of the context bound to the current task."""

    return dict(_log_context.get())


def push_log_context(**values: object) -> contextvars.Token[Dict[str, object]]:
    """Bind ``values`` (None values are skipped) and return a reset token."""

    merged = dict(_log_context.get())
    merged.update({key: value for key, value in values.items() if value is not None})
    return _log_context.set(merged)


def pop_log_context(token: contextvars.Token[Dict[str, object]]) -> None:
    _log_context.reset(token)


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind ``values`` for the duration of the block."""

    token = push_log_context(**values)
    try:
        yield
    finally:
        pop_log_context(token)


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


@contextlib.contextmanager
def correlation_scope(correlation_id: Optional[str] = None, **values: object) -> Iterator[str]:
    """Bind a correlation id, reusing the one already bound when present.

    Yields the id in effect inside the block.
    """

    current = _log_context.get().get("correlation_id")
    resolved = correlation_id or (str(current) if current else new_correlation_id())
    with log_context(correlation_id=resolved, **values):
        yield resolved


def clear_log_context() -> None:
    _log_context.set({})


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "JSONLogFormatter",
    "LOG_DIR_ENV",
    "LogContextFilter",
    "clear_log_context",
    "configure_logging_level",
    "correlation_scope",
    "get_log_context",
    "get_logger",
    "log_context",
    "new_correlation_id",
    "pop_log_context",
    "push_log_context",
    "setup_logging",
]
