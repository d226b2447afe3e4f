"""
json_builder.py
---------------

Terse builders for JSON request payloads.

``obj`` builds an insertion-ordered object from alternating keys and
values (or keyword arguments), ``arr`` builds an array from its
positional arguments.  Both nest freely and serialise to compact JSON
text with ``str()``::

    payload = obj(
        "name", "Ada",
        "tags", arr("admin", "ops"),
        "address", obj("city", "London"),
    )
    str(payload)  # '{"name":"Ada","tags":["admin","ops"],"address":{"city":"London"}}'
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterable, Tuple

from pydantic import BaseModel

from tersehttp.errors import JsonBuildError
from tersehttp.json_node import JsonNode

JSON_MEDIA_TYPE = "application/json"


def _default(value: Any) -> Any:
    """``json.dumps`` hook for values that are not plain JSON types."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, JsonNode):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json_text(value: Any) -> str:
    """Serialise ``value`` to compact JSON text.

    :raises JsonBuildError: if some nested value cannot be serialised
    """
    try:
        return json.dumps(value, default=_default, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise JsonBuildError(f"Failed to serialize JSON value: {exc}") from exc


class JsonObj(dict):
    """Insertion-ordered JSON object.

    Positional arguments are alternating keys and values; keyword
    arguments are appended after them.  Duplicate keys keep the last
    value.
    """

    def __init__(self, *kvs: Any, **fields: Any) -> None:
        super().__init__()
        if len(kvs) % 2 != 0:
            raise JsonBuildError(
                f"Arguments must be key-value pairs (even length), got {len(kvs)} arguments"
            )
        pairs = []
        for i in range(0, len(kvs), 2):
            key = kvs[i]
            if not isinstance(key, str):
                raise JsonBuildError(
                    f"Key at position {i} must be a string, got {type(key).__name__}"
                )
            pairs.append((key, kvs[i + 1]))
        # validate everything before storing anything
        for key, value in pairs:
            self[key] = value
        for key, value in fields.items():
            self[key] = value

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Any]]) -> "JsonObj":
        """Build an object from an iterable of ``(key, value)`` tuples."""
        flat = []
        for pair in pairs:
            try:
                key, value = pair
            except (TypeError, ValueError) as exc:
                raise JsonBuildError(f"Expected a (key, value) pair, got {pair!r}") from exc
            flat.extend((key, value))
        return cls(*flat)

    def to_json(self) -> str:
        return to_json_text(self)

    def body(self) -> bytes:
        """UTF-8 encoded JSON text, ready to send as a request body."""
        return self.to_json().encode("utf-8")

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"obj({self.to_json()})"


class JsonArr(list):
    """Ordered JSON array built from positional elements."""

    def __init__(self, *elements: Any) -> None:
        super().__init__(elements)

    def to_json(self) -> str:
        return to_json_text(self)

    def body(self) -> bytes:
        return self.to_json().encode("utf-8")

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"arr({self.to_json()})"


def obj(*kvs: Any, **fields: Any) -> JsonObj:
    """Create a JSON object from alternating keys and values and/or keywords.

    :raises JsonBuildError: on an odd number of positional arguments or a
        non-string key
    """
    return JsonObj(*kvs, **fields)


def arr(*elements: Any) -> JsonArr:
    """Create a JSON array from its arguments (zero or more)."""
    return JsonArr(*elements)
