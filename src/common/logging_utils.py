"""Centralized logging helpers.

``configure_logging`` installs a single stderr handler on the root logger
(text by default, JSON lines on request). The remaining helpers keep DEBUG
traces structured and cheap: ``extra_context`` builds the ``extra=`` mapping,
``is_debug_enabled`` guards expensive trace construction, ``safe_url`` keeps
credentials and query strings out of logs and ``Timer`` measures durations.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

# Record attribute holding structured fields.
_CONTEXT_ATTR = "nugbot_context"

_TRUTHY = ("1", "true", "yes", "on")
# Set on handlers owned by configure_logging.
_HANDLER_ATTR = "_nugbot_handler"


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records.

    Fields whose value is ``None`` are dropped.
    """
    context = {key: value for key, value in fields.items() if value is not None}
    return {_CONTEXT_ATTR: context}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip userinfo, query string and fragment from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, up to now if the block is still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(getattr(record, _CONTEXT_ATTR, {}) or {})
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure the root logger for CLI use.

    Args:
        level: Level name; falls back to NUGBOT_LOG_LEVEL, then INFO.
        json_output: Emit JSON lines on stderr; falls back to NUGBOT_LOG_JSON.
        log_file: Optional path for an additional plain-text file handler.
    """
    if json_output is None:
        json_output = os.environ.get(Constants.ENV_LOG_JSON, "").strip().lower() in _TRUTHY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    if json_output:
        stream_handler.setFormatter(JsonFormatter())
    else:
        stream_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    setattr(stream_handler, _HANDLER_ATTR, True)
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        setattr(file_handler, _HANDLER_ATTR, True)
        root.addHandler(file_handler)

    root.setLevel(_resolve_level(level))
