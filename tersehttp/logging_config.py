"""
logging_config.py
------------------

Shared logging configuration and helpers for structured logging inside
the library.  Messages are serialised as JSON strings so that output
can be parsed downstream by whatever handler the host application
installs.

The library never configures the root logger on import.  A
``NullHandler`` is attached to the ``tersehttp`` logger so that nothing
is printed unless the application opts in, either with its own logging
setup or by calling :func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Iterable, Tuple

logger = logging.getLogger("tersehttp")
logger.addHandler(logging.NullHandler())

# Header names whose values never reach the logs
SENSITIVE_HEADERS = {"authorization", "cookie", "proxy-authorization", "set-cookie"}

_SENSITIVE_KEYWORDS = ("token", "password", "secret")


def configure_logging(level: int = logging.INFO) -> None:
    """Send library log records to stdout.

    Uses the same format as the rest of our services: timestamp, level
    and the raw (JSON) message.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS)


def _sanitize(obj: Any) -> Any:
    """Make a log field safe to ``json.dumps``.

    Request payloads and log fields may carry credentials: mapping keys
    that look like one (see ``_SENSITIVE_KEYWORDS``) are dropped at every
    depth.  Raw bytes are replaced by a size marker, sequences become
    lists, and values ``json`` cannot encode fall back to ``str()``.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, dict):
        return {
            str(key): _sanitize(value)
            for key, value in obj.items()
            if not _is_sensitive(str(key))
        }
    if isinstance(obj, (list, tuple)):
        return [_sanitize(item) for item in obj]
    try:
        return json.loads(json.dumps(obj))
    except (TypeError, ValueError):
        return str(obj)


def safe_headers(headers: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Return request headers as a dict without credentials."""
    return {k: v for k, v in headers if k.lower() not in SENSITIVE_HEADERS}


def log_event(level: int, event: str, **fields: Any) -> None:
    """Log a single JSON event at ``level``."""
    if not logger.isEnabledFor(level):
        return
    data: Dict[str, Any] = {"event": event}
    data.update(_sanitize(fields))
    logger.log(level, json.dumps(data))


def log_http_request(method: str, url: str, *, headers: Iterable[Tuple[str, str]] | None = None,
                     body: Any = None, status: int | None = None,
                     duration_ms: float | None = None) -> None:
    """Log an outbound HTTP request at DEBUG level.

    Called by the request builder once before the exchange and once
    after it completes.  Credentials are removed from the headers and
    only high-level information (method, URL, status and duration) is
    recorded unless a body is passed explicitly.

    Parameters
    ----------
    method : str
        The HTTP method (GET, POST, etc.)
    url : str
        The URL being requested.
    headers : iterable of (name, value), optional
        Request headers.  Sensitive names are removed.
    body : Any, optional
        Request payload, only passed when body logging is enabled.
    status : int, optional
        Response status code (log end only).
    duration_ms : float, optional
        Time taken in milliseconds (log end only).
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    data: Dict[str, Any] = {
        "event": "http_request",
        "method": method,
        "url": url,
    }
    if headers is not None:
        data["headers"] = safe_headers(headers)
    if body:
        data["body"] = _sanitize(body)
    if status is not None:
        data["status"] = status
    if duration_ms is not None:
        data["duration_ms"] = round(duration_ms, 2)
    logger.debug(json.dumps(data))
