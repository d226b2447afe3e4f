"""
request.py
----------

Fluent request builder.  ``req(url)`` starts a request; configuration
calls chain and a terminal call performs the exchange and returns an
:data:`~tersehttp.outcome.Outcome`::

    result = (
        req("https://api.example.com/users")
        .post()
        .bearer(token)
        .body(obj("name", "Ada"))
        .json(User)
    )

Builders are immutable: every configuration call returns a new builder
and leaves the receiver untouched, so a partially configured builder can
be kept around and reused, from several threads if needed::

    api = req(base_url).bearer(token).header("Accept", "application/json")
    users = api.json(list[User])
    api.post().body(obj("name", "Ada")).send()

Terminal calls:

``send()``
    Outcome over the raw response text.  A 2xx body that is not JSON
    still yields ``Success``; its ``raw_json`` is then a text node.
``json(target_type)``
    Outcome over ``target_type``.  A 2xx body that does not decode gives
    ``ParseFailure``.
``json_node()``
    Same as ``json`` with a :class:`~tersehttp.json_node.JsonNode` target.
"""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Type, TypeVar, Union

from tersehttp.clients.transport import Transport, TransportResponse, as_transport, get_default_transport
from tersehttp.core.codec import decode_as
from tersehttp.core.config import get_settings
from tersehttp.errors import TransportError
from tersehttp.json_builder import JSON_MEDIA_TYPE, to_json_text
from tersehttp.json_node import JsonNode
from tersehttp.logging_config import log_event, log_http_request
from tersehttp.outcome import HttpFailure, NetworkFailure, Outcome, ParseFailure, Success

T = TypeVar("T")

METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD")
# Methods sent without a body, whatever was configured
BODYLESS_METHODS = frozenset({"GET", "HEAD"})

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class OutgoingRequest:
    """Exactly what is handed to the transport."""

    method: str
    url: str
    headers: Tuple[Tuple[str, str], ...]
    body: Optional[bytes]

    def header(self, name: str) -> Optional[str]:
        """Last value of header ``name`` (case-insensitive), or ``None``."""
        found = None
        for key, value in self.headers:
            if key.lower() == name.lower():
                found = value
        return found


class RequestBuilder:
    """Immutable fluent HTTP request configuration."""

    __slots__ = ("_url", "_method", "_headers", "_cookies", "_body", "_body_type", "_transport")

    def __init__(self, url: str) -> None:
        if not isinstance(url, str) or not url.strip():
            raise ValueError("url must be a non-empty string")
        self._url = url
        self._method = "GET"
        self._headers: Tuple[Tuple[str, str], ...] = ()
        self._cookies: Tuple[str, ...] = ()
        self._body: Optional[bytes] = None
        # Content-Type set by body() itself rather than by the caller
        self._body_type: Optional[str] = None
        self._transport: Optional[Transport] = None

    def _replace(self, **changes: Any) -> "RequestBuilder":
        clone = object.__new__(RequestBuilder)
        for slot in self.__slots__:
            object.__setattr__(clone, slot, changes.get(slot, getattr(self, slot)))
        return clone

    def __repr__(self) -> str:
        return f"RequestBuilder({self._method} {self._url})"

    @property
    def url(self) -> str:
        return self._url

    # -----------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------
    def client(self, transport: Any) -> "RequestBuilder":
        """Use a specific transport, ``httpx.Client`` or ``requests.Session``."""
        return self._replace(_transport=as_transport(transport))

    # -----------------------------------------------------------------
    # Method
    # -----------------------------------------------------------------
    def method(self, name: str) -> "RequestBuilder":
        verb = name.upper()
        if verb not in METHODS:
            raise ValueError(f"Unsupported HTTP method {name!r}; expected one of {', '.join(METHODS)}")
        return self._replace(_method=verb)

    def get(self) -> "RequestBuilder":
        return self.method("GET")

    def post(self) -> "RequestBuilder":
        return self.method("POST")

    def put(self) -> "RequestBuilder":
        return self.method("PUT")

    def delete(self) -> "RequestBuilder":
        return self.method("DELETE")

    def patch(self) -> "RequestBuilder":
        return self.method("PATCH")

    def head(self) -> "RequestBuilder":
        return self.method("HEAD")

    # -----------------------------------------------------------------
    # Headers and cookies
    # -----------------------------------------------------------------
    def header(self, key: str, value: str) -> "RequestBuilder":
        """Set header ``key``, replacing any earlier value for the same name."""
        lowered = key.lower()
        kept = tuple((k, v) for k, v in self._headers if k.lower() != lowered)
        changes: dict = {"_headers": kept + ((key, str(value)),)}
        if lowered == "content-type":
            changes["_body_type"] = None
        return self._replace(**changes)

    def headers(self, headers: Union[Mapping[str, str], Iterable[Tuple[str, str]]]) -> "RequestBuilder":
        """Set several headers, in iteration order."""
        items = headers.items() if isinstance(headers, Mapping) else headers
        builder = self
        for key, value in items:
            builder = builder.header(key, value)
        return builder

    def bearer(self, token: str) -> "RequestBuilder":
        return self.header("Authorization", f"Bearer {token}")

    def basic(self, username: str, password: str) -> "RequestBuilder":
        credentials = f"{username}:{password}".encode("utf-8")
        encoded = base64.b64encode(credentials).decode("ascii")
        return self.header("Authorization", f"Basic {encoded}")

    def content_type(self, media_type: str) -> "RequestBuilder":
        return self.header("Content-Type", media_type)

    def cookie(self, name: str, value: str) -> "RequestBuilder":
        """Add a cookie; all cookies are sent in one ``Cookie`` header."""
        return self._replace(_cookies=self._cookies + (f"{name}={value}",))

    # -----------------------------------------------------------------
    # Body
    # -----------------------------------------------------------------
    def body(self, content: Any, media_type: Optional[str] = None) -> "RequestBuilder":
        """Set the request body.

        ``obj(...)``/``arr(...)`` builders (or plain dicts and lists) are
        serialised to JSON and ``Content-Type: application/json`` is set.
        Text and bytes are sent as given; ``media_type`` becomes the
        Content-Type, and without it ``text/plain`` is used unless the
        caller set a Content-Type header explicitly.  A type chosen by an
        earlier ``body()`` call is always replaced.
        """
        if isinstance(content, (dict, list)):
            builder = self._replace(_body=to_json_text(content).encode("utf-8"))
            return builder._implicit_content_type(media_type or JSON_MEDIA_TYPE)
        if isinstance(content, str):
            raw = content.encode("utf-8")
        elif isinstance(content, (bytes, bytearray)):
            raw = bytes(content)
        else:
            raise TypeError(
                f"body() expects obj(...), arr(...), str or bytes, got {type(content).__name__}"
            )
        builder = self._replace(_body=raw)
        if media_type is not None:
            return builder._implicit_content_type(media_type)
        current = self._header_value("Content-Type")
        if current is None or current == self._body_type:
            return builder._implicit_content_type(TEXT_MEDIA_TYPE)
        return builder

    def _implicit_content_type(self, media_type: str) -> "RequestBuilder":
        return self.content_type(media_type)._replace(_body_type=media_type)

    def _header_value(self, name: str) -> Optional[str]:
        for key, value in self._headers:
            if key.lower() == name.lower():
                return value
        return None

    # -----------------------------------------------------------------
    # Building and sending
    # -----------------------------------------------------------------
    def build(self) -> OutgoingRequest:
        """Resolve cookies and body rules into the request the transport sees."""
        headers = self._headers
        if self._cookies:
            headers = tuple((k, v) for k, v in headers if k.lower() != "cookie")
            headers += (("Cookie", "; ".join(self._cookies)),)
        if self._method in BODYLESS_METHODS:
            body = None
        else:
            body = self._body if self._body is not None else b""
        return OutgoingRequest(self._method, self._url, headers, body)

    def _exchange(self) -> Union[TransportResponse, NetworkFailure]:
        request = self.build()
        transport = self._transport or get_default_transport()
        logged_body = None
        if request.body and get_settings().log_bodies:
            logged_body = request.body.decode("utf-8", errors="replace")
        log_http_request(request.method, request.url, headers=request.headers, body=logged_body)
        start_time = time.time()
        try:
            response = transport.send(request.method, request.url, request.headers, request.body)
        except TransportError as exc:
            return self._network_failure(request, exc.cause, start_time)
        except OSError as exc:
            # custom transports may let socket errors through untranslated
            return self._network_failure(request, exc, start_time)
        duration_ms = (time.time() - start_time) * 1000
        log_http_request(request.method, request.url, status=response.status, duration_ms=duration_ms)
        return response

    @staticmethod
    def _network_failure(request: OutgoingRequest, cause: BaseException,
                         start_time: float) -> NetworkFailure:
        log_event(
            logging.WARNING,
            "http_error",
            method=request.method,
            url=request.url,
            detail=str(cause),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return NetworkFailure(cause)

    def send(self) -> Outcome[str]:
        """Perform the request and return the body as text.

        Lenient on purpose: a 2xx body that is not JSON still produces
        ``Success``, with a text node as ``raw_json``.
        """
        result = self._exchange()
        if isinstance(result, NetworkFailure):
            return result
        if not result.is_success:
            return HttpFailure(result.status, result.text, result.headers)
        try:
            node = JsonNode.parse(result.text)
        except ValueError:
            node = JsonNode.text(result.text)
        return Success(result.text, node, result.status, result.headers)

    def json(self, target_type: Type[T]) -> Outcome[T]:
        """Perform the request and decode a 2xx body into ``target_type``."""
        result = self._exchange()
        if isinstance(result, NetworkFailure):
            return result
        if not result.is_success:
            return HttpFailure(result.status, result.text, result.headers)
        try:
            if target_type is JsonNode:
                node = JsonNode.parse(result.text)
                data: Any = node
            else:
                data = decode_as(result.text, target_type)
                node = JsonNode.parse(result.text)
        except ValueError as exc:
            log_event(
                logging.DEBUG,
                "parse_error",
                url=self._url,
                status=result.status,
                target=getattr(target_type, "__name__", str(target_type)),
                detail=str(exc),
            )
            return ParseFailure(result.status, result.text, exc, result.headers)
        return Success(data, node, result.status, result.headers)

    def json_node(self) -> Outcome[JsonNode]:
        """Perform the request and return the body as a :class:`JsonNode`."""
        return self.json(JsonNode)


def req(url: str) -> RequestBuilder:
    """Start a new request to ``url`` (GET unless another method is chosen)."""
    return RequestBuilder(url)
