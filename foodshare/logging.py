"""
Logging setup for the FoodShare API.

Usage:
    from foodshare.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Added listing %s to cart", sanitize_id_for_logging(listing_id))

Request-supplied values (session ids, listing ids, search text) go through
the sanitize helpers before they reach a log line.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Client libraries whose per-request logs drown out basket activity
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis", "urllib3")

# Session ids are bearer-like basket handles; only a prefix is logged
SESSION_LOG_PREFIX = 6


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _use_simple_format() -> bool:
    # Hosted runtimes add their own timestamps
    return os.environ.get("VERCEL") == "1" or os.environ.get("LOG_FORMAT") == "simple"


def configure_logging(force: bool = False) -> None:
    """Attach a stdout handler to the root logger unless one is present."""
    root = logging.getLogger()
    if root.handlers and not force:
        return

    level = _get_log_level()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if _use_simple_format() else LOG_FORMAT))

    if force:
        for existing in list(root.handlers):
            root.removeHandler(existing)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape characters that could forge log entries (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value) -> str:
    """Listing, seller or buyer id for a log line: escaped, at most 8 chars."""
    if id_value is None or id_value == "":
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:8]


def sanitize_session_for_logging(session_id: str | None) -> str:
    """Session id reduced to a short prefix, e.g. "sessio…"."""
    if not session_id:
        return "N/A"
    safe_value = _escape_log_injection(session_id)
    if len(safe_value) <= SESSION_LOG_PREFIX:
        return safe_value
    return safe_value[:SESSION_LOG_PREFIX] + "…"


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Free text (search queries, listing names) for a log line."""
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_session_for_logging",
    "sanitize_string_for_logging",
]
