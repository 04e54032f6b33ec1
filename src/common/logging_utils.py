"""Centralized logging helpers.

Provides one place to configure the root logger and a handful of helpers
used by the HTTP client and the retention stages to emit structured DEBUG
traces without leaking credentials into log output.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_PARAMS = {"token", "access_token", "api_key", "apikey", "key", "password", "secret"}
_TOKEN_RE = re.compile(r"(gh[pousr]_[A-Za-z0-9]{16,}|github_pat_[A-Za-z0-9_]{16,})")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the process.

    The level comes from the explicit argument, then RELEASESWEEP_LOG_LEVEL,
    then INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def add_file_handler(path: str) -> None:
    """Mirror log output to a file."""
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
    logging.getLogger().addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so records only carry populated fields.
    """
    return {key: value for key, value in fields.items() if value is not None}


def redact(text: str) -> str:
    """Mask anything that looks like a GitHub token."""
    if not text:
        return text
    return _TOKEN_RE.sub("***", text)


def safe_url(url: str) -> str:
    """Return the URL with userinfo and sensitive query values masked."""
    if not url:
        return url
    parts = urlsplit(url)
    netloc = parts.netloc.rsplit("@", 1)[-1]
    query = urlencode(
        [
            (k, "***" if k.lower() in _SENSITIVE_PARAMS else v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
        ]
    )
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
