"""
errors.py
---------

Exception types raised by the library.  Request outcomes are returned
as values, so these only surface when a caller asks for them
(``or_else_throw``), when a builder is misused, or inside a transport
adapter before the request builder converts the error into a
``NetworkFailure``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tersehttp.outcome import Failure


class TersehttpError(Exception):
    """Base class for all library errors."""


class JsonBuildError(TersehttpError, ValueError):
    """Invalid arguments to ``obj``/``arr`` or a value that cannot be serialised."""


class OutcomeError(TersehttpError, RuntimeError):
    """Raised by ``or_else_throw`` when the outcome is a failure."""

    def __init__(self, failure: "Failure") -> None:
        super().__init__(failure.message())
        self.failure = failure


class TransportError(TersehttpError):
    """The exchange could not complete (connect, DNS, read/write, timeout).

    ``cause`` holds the exception raised by the underlying HTTP library.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause
