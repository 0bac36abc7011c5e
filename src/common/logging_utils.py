"""Centralized logging helpers.

Provides one place to configure the root logger plus small utilities used by
the HTTP and resolution layers to emit structured DEBUG traces without paying
for them when DEBUG is disabled.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_REDACTED = "***"
_SENSITIVE_KEYS = ("token", "secret", "password", "key", "auth")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for CLI usage.

    Level precedence: explicit argument, then the environment variable named by
    ``Constants.ENV_LOG_LEVEL``, then INFO. Logs go to stderr so the JSON report
    on stdout stays machine-readable.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when the logger would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so formatters only see populated fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(value: Optional[str]) -> str:
    """Mask a sensitive value, keeping nothing but its presence."""
    if not value:
        return ""
    return _REDACTED


def safe_url(url: str) -> str:
    """Return the URL with credentials and sensitive query values removed."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    query = parts.query
    if query:
        pairs = []
        for pair in query.split("&"):
            name, _, value = pair.partition("=")
            if any(k in name.lower() for k in _SENSITIVE_KEYS):
                value = redact(value)
            pairs.append(f"{name}={value}" if value else name)
        query = "&".join(pairs)
    return urlunsplit((parts.scheme, netloc, parts.path, query, ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
