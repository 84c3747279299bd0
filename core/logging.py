"""
Logging for the cart service.

The root logger gets one stdout handler at import time, at the level named
by LOG_LEVEL (default INFO). Modules take their logger from get_logger.
Cart ids, session ids and skus reach log lines only through the sanitizers.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Characters that would let a caller-supplied value forge a new log entry
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})

ID_LOG_LENGTH = 12


def _setup_root() -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


_setup_root()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Escaped id cut to its prefix (``exp_``/``ctx_``) plus the first uuid chars."""
    if not id_value:
        return "N/A"
    return str(id_value).translate(_LOG_ESCAPES)[:ID_LOG_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escaped free-form value, truncated with a trailing ``...`` past max_length."""
    if not value:
        return "N/A"
    escaped = str(value).translate(_LOG_ESCAPES)
    if len(escaped) > max_length:
        return escaped[:max_length] + "..."
    return escaped
