"""
clients/transport.py
--------------------

Transport adapters: the only place where an actual HTTP library is
called.  A transport performs a single exchange and returns the status,
headers and decoded body text, or raises :class:`TransportError` when
no response was obtained.  It never retries.

``HttpxTransport`` is the default and wraps an ``httpx.Client`` with
connection pooling and the timeouts from :mod:`tersehttp.core.config`.
The shared default instance is created lazily, once per process, and
is safe to use from several threads.  ``RequestsTransport`` wraps a
``requests.Session`` for code bases already built around ``requests``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import httpx
import requests

from tersehttp.core.config import Settings, get_settings
from tersehttp.errors import TransportError

HeaderList = Sequence[Tuple[str, str]]


@dataclass
class TransportResponse:
    """Status line, headers and body of one exchange.

    Header names are lower-cased; repeated headers keep every value in
    arrival order.
    """

    status: int
    headers: Dict[str, List[str]] = field(default_factory=dict)
    text: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """Anything able to perform one HTTP exchange."""

    def send(self, method: str, url: str, headers: HeaderList,
             body: Optional[bytes]) -> TransportResponse:
        ...


def _multimap(items: Sequence[Tuple[str, str]]) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for name, value in items:
        out.setdefault(name.lower(), []).append(value)
    return out


def build_httpx_client(settings: Settings | None = None) -> httpx.Client:
    """Create an ``httpx.Client`` configured from the library settings."""
    settings = settings or get_settings()
    headers = {"User-Agent": settings.user_agent} if settings.user_agent else None
    return httpx.Client(
        http2=settings.http2,
        timeout=httpx.Timeout(
            connect=settings.connect_timeout,
            read=settings.read_timeout,
            write=settings.write_timeout,
            pool=settings.pool_timeout,
        ),
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
        ),
        follow_redirects=settings.follow_redirects,
        headers=headers,
    )


class HttpxTransport:
    """Transport backed by an ``httpx.Client``."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client if client is not None else build_httpx_client()

    @property
    def client(self) -> httpx.Client:
        return self._client

    def close(self) -> None:
        """Close the underlying client and release pooled connections."""
        self._client.close()

    def send(self, method: str, url: str, headers: HeaderList,
             body: Optional[bytes]) -> TransportResponse:
        try:
            response = self._client.request(method, url, headers=list(headers), content=body)
        except httpx.TransportError as exc:
            # connect, read/write, timeouts, protocol errors
            raise TransportError(exc) from exc
        return TransportResponse(
            status=response.status_code,
            headers=_multimap(response.headers.multi_items()),
            text=response.text,
        )


class RequestsTransport:
    """Transport backed by a ``requests.Session``.

    Timeouts are given as a ``(connect, read)`` tuple, which is what
    ``requests`` accepts; requests has no separate write timeout.
    """

    NETWORK_ERRORS = (
        requests.exceptions.ConnectionError,
        requests.exceptions.Timeout,
        requests.exceptions.ChunkedEncodingError,
        requests.exceptions.ContentDecodingError,
    )

    def __init__(self, session: requests.Session | None = None,
                 timeout: Tuple[float, float] | None = None) -> None:
        settings = get_settings()
        self._session = session if session is not None else requests.Session()
        self.timeout = timeout or (settings.connect_timeout, settings.read_timeout)
        self.allow_redirects = settings.follow_redirects

    @property
    def session(self) -> requests.Session:
        return self._session

    def close(self) -> None:
        self._session.close()

    def send(self, method: str, url: str, headers: HeaderList,
             body: Optional[bytes]) -> TransportResponse:
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=self.timeout,
                allow_redirects=self.allow_redirects,
            )
        except self.NETWORK_ERRORS as exc:
            raise TransportError(exc) from exc
        return TransportResponse(
            status=response.status_code,
            headers=_requests_headers(response),
            text=_requests_text(response),
        )


def _requests_headers(response: requests.Response) -> Dict[str, List[str]]:
    # requests folds repeated headers into one comma separated value; the
    # raw urllib3 headers still have them apart when available.
    raw = getattr(response, "raw", None)
    raw_headers = getattr(raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "items"):
        return _multimap(list(raw_headers.items()))
    return _multimap(list(response.headers.items()))


def _requests_text(response: requests.Response) -> str:
    # requests guesses ISO-8859-1 for text/* without a charset; JSON APIs are UTF-8
    if response.encoding is None or "charset" not in response.headers.get("Content-Type", "").lower():
        return response.content.decode("utf-8", errors="replace")
    return response.text


def as_transport(candidate: Any) -> Transport:
    """Wrap an ``httpx.Client`` or ``requests.Session`` into a transport.

    Objects that already implement :class:`Transport` are returned as-is.
    """
    if isinstance(candidate, httpx.Client):
        return HttpxTransport(candidate)
    if isinstance(candidate, requests.Session):
        return RequestsTransport(candidate)
    if isinstance(candidate, Transport):
        return candidate
    raise TypeError(
        f"Expected a Transport, httpx.Client or requests.Session, got {type(candidate).__name__}"
    )


# Shared transport for requests that do not override it
_default_transport: Optional[HttpxTransport] = None
_default_lock = threading.Lock()


def get_default_transport() -> HttpxTransport:
    """Return the process-wide transport, creating it on first use."""
    global _default_transport
    if _default_transport is None:
        with _default_lock:
            if _default_transport is None:
                _default_transport = HttpxTransport()
    return _default_transport


def reset_default_transport() -> None:
    """Close and drop the shared transport; the next request builds a new one."""
    global _default_transport
    with _default_lock:
        if _default_transport is not None:
            _default_transport.close()
        _default_transport = None
