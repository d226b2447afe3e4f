"""
outcome.py
----------

Result of a terminated request.  Every terminal call on a request
builder returns exactly one of four variants:

``Success``
    2xx response whose body was converted to the requested type.
``NetworkFailure``
    The exchange never produced a status line (DNS, connect, timeout,
    broken connection).  Usually worth retrying.
``HttpFailure``
    The server answered with a non-2xx status.  The body is kept so the
    caller can inspect the error payload (see :meth:`HttpFailure.parse_as`).
``ParseFailure``
    2xx response whose body did not match the requested type, which
    usually means the API contract changed.

Failures are returned, never raised.  Callers pick their style::

    match req(url).json(User):
        case Success(data=user):
            ...
        case HttpFailure(status=404):
            ...
        case failure:
            log.warning(failure.message())

or use the helpers ``or_else_throw``, ``to_optional``, ``map`` and
``handle`` available on every variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, Type, TypeVar, Union

from tersehttp.core.codec import decode_as
from tersehttp.errors import OutcomeError
from tersehttp.json_node import JsonNode

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")

Headers = Dict[str, List[str]]


class Failure(Protocol):
    """Unified view over the three failure variants.

    Only :meth:`message` is guaranteed; status and body are reachable by
    matching on the concrete variant.
    """

    def message(self) -> str:
        ...


class _OutcomeOps:
    """Operations shared by all outcome variants."""

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def or_else_throw(self) -> Any:
        """Return the payload, or raise :class:`OutcomeError` for a failure."""
        match self:
            case Success():
                return self.data
            case NetworkFailure() | HttpFailure() | ParseFailure():
                raise OutcomeError(self)
        raise TypeError(f"Unknown outcome variant {type(self).__name__}")

    def to_optional(self) -> Any:
        """Return the payload, or ``None`` for any failure."""
        match self:
            case Success():
                return self.data
            case _:
                return None

    def map(self, fn: Callable[[Any], Any]) -> "Outcome[Any]":
        """Transform a Success payload; failures are returned untouched."""
        match self:
            case Success():
                return Success(fn(self.data), self.raw_json, self.status, self.headers)
            case _:
                return self  # type: ignore[return-value]

    def handle(self, on_success: Callable[["Success[Any]"], Any],
               on_failure: Callable[[Failure], Any]) -> None:
        """Invoke exactly one of the callbacks depending on the variant."""
        match self:
            case Success():
                on_success(self)
            case _:
                on_failure(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Success(_OutcomeOps, Generic[T]):
    """Successful response.

    ``data`` is the payload as requested, ``raw_json`` the whole body as
    a :class:`JsonNode` (fields the target type does not model are still
    reachable there).
    """

    data: T
    raw_json: JsonNode
    status: int
    headers: Headers = field(default_factory=dict)


@dataclass(frozen=True)
class NetworkFailure(_OutcomeOps):
    """Connection-level failure: timeout, DNS, refused or reset connection."""

    cause: BaseException

    def message(self) -> str:
        return f"Network error: {str(self.cause) or type(self.cause).__name__}"


@dataclass(frozen=True)
class HttpFailure(_OutcomeOps):
    """The server returned an error status code (4xx, 5xx)."""

    status: int
    raw_body: str
    headers: Headers = field(default_factory=dict)

    def message(self) -> str:
        return f"HTTP {self.status}: {self.raw_body}"

    def parse_as(self, error_type: Type[E]) -> Optional[E]:
        """Best-effort decode of the error body; ``None`` if it does not parse.

        Also ``None`` when ``error_type`` is not something pydantic can
        validate into.
        """
        try:
            return decode_as(self.raw_body, error_type)
        except (ValueError, TypeError, RecursionError):
            return None


@dataclass(frozen=True)
class ParseFailure(_OutcomeOps):
    """2xx response whose body could not be converted to the requested type."""

    status: int
    raw_body: str
    cause: BaseException
    headers: Headers = field(default_factory=dict)

    def message(self) -> str:
        return f"Parse error: {self.cause}"


Outcome = Union[Success[T], NetworkFailure, HttpFailure, ParseFailure]
