"""
tersehttp package
-----------------

Terse REST calls over ``httpx`` with JSON handling through pydantic.
Everything a caller normally needs is re-exported here::

    from tersehttp import req, obj, arr, Success, HttpFailure

    user = req("https://api.example.com/users/1").bearer(token).json(User).or_else_throw()
"""

from tersehttp.clients.transport import (
    HttpxTransport,
    RequestsTransport,
    Transport,
    TransportResponse,
    get_default_transport,
    reset_default_transport,
)
from tersehttp.core.config import Settings, get_settings
from tersehttp.errors import JsonBuildError, OutcomeError, TersehttpError, TransportError
from tersehttp.json_builder import JsonArr, JsonObj, arr, obj
from tersehttp.json_node import JsonNode
from tersehttp.logging_config import configure_logging
from tersehttp.outcome import Failure, HttpFailure, NetworkFailure, Outcome, ParseFailure, Success
from tersehttp.request import OutgoingRequest, RequestBuilder, req

__version__ = "0.1.0"

__all__ = [
    "obj",
    "arr",
    "req",
    "JsonObj",
    "JsonArr",
    "JsonNode",
    "RequestBuilder",
    "OutgoingRequest",
    "Outcome",
    "Success",
    "Failure",
    "NetworkFailure",
    "HttpFailure",
    "ParseFailure",
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    "RequestsTransport",
    "get_default_transport",
    "reset_default_transport",
    "Settings",
    "get_settings",
    "configure_logging",
    "TersehttpError",
    "JsonBuildError",
    "OutcomeError",
    "TransportError",
]
