"""
json_node.py
------------

Structural JSON representation used when no concrete target type is
requested.  A :class:`JsonNode` wraps an already decoded JSON value
(``dict``, ``list``, ``str``, number, ``bool`` or ``None``) and offers
null-safe navigation and lenient scalar conversion, which is handy for
exploring an API response without modelling it first::

    node = req(url).json_node().or_else_throw()
    node.get("address").get("city").as_text()
    node.path("missing").path("deeper").is_missing()   # True

Nodes are read-only views.  Mutating ``node.value`` mutates the
underlying decoded data and is not supported.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Optional, Tuple, Union

Key = Union[str, int]

_MISSING = object()


class JsonNode:
    """Read-only view over one decoded JSON value."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = None) -> None:
        if isinstance(value, JsonNode):
            value = value._value
        self._value = value

    # -----------------------------------------------------------------
    # Constructors
    # -----------------------------------------------------------------
    @classmethod
    def parse(cls, text: str | bytes) -> "JsonNode":
        """Decode JSON text into a node.

        :raises ValueError: if ``text`` is not valid JSON (including empty
            text) or is nested too deeply for the decoder
        """
        try:
            return cls(json.loads(text))
        except RecursionError as exc:
            raise ValueError(f"JSON nested too deeply to decode: {exc}") from exc

    @classmethod
    def text(cls, value: str) -> "JsonNode":
        """Build a plain text node, used when a body is not JSON."""
        return cls(str(value))

    @classmethod
    def missing(cls) -> "JsonNode":
        node = cls()
        node._value = _MISSING
        return node

    # -----------------------------------------------------------------
    # Type predicates
    # -----------------------------------------------------------------
    @property
    def value(self) -> Any:
        """The wrapped Python value (``None`` for a missing node)."""
        return None if self._value is _MISSING else self._value

    def is_missing(self) -> bool:
        return self._value is _MISSING

    def is_object(self) -> bool:
        return isinstance(self._value, dict)

    def is_array(self) -> bool:
        return isinstance(self._value, list)

    def is_container(self) -> bool:
        return isinstance(self._value, (dict, list))

    def is_textual(self) -> bool:
        return isinstance(self._value, str)

    def is_boolean(self) -> bool:
        return isinstance(self._value, bool)

    def is_number(self) -> bool:
        return isinstance(self._value, (int, float)) and not isinstance(self._value, bool)

    def is_null(self) -> bool:
        return self._value is None

    # -----------------------------------------------------------------
    # Navigation
    # -----------------------------------------------------------------
    def has(self, key: Key) -> bool:
        """True if this object has field ``key`` or this array has index ``key``."""
        return self._child(key) is not _MISSING

    def get(self, key: Key) -> Optional["JsonNode"]:
        """Child node for a field name or array index, or ``None``."""
        child = self._child(key)
        if child is _MISSING:
            return None
        return JsonNode(child)

    def path(self, key: Key) -> "JsonNode":
        """Like :meth:`get` but returns a missing node instead of ``None``."""
        child = self._child(key)
        if child is _MISSING:
            return JsonNode.missing()
        return JsonNode(child)

    def _child(self, key: Key) -> Any:
        if isinstance(self._value, dict) and isinstance(key, str):
            return self._value.get(key, _MISSING)
        if isinstance(self._value, list) and isinstance(key, int) and not isinstance(key, bool):
            if 0 <= key < len(self._value):
                return self._value[key]
        return _MISSING

    def keys(self) -> List[str]:
        """Field names of an object node in document order (empty otherwise)."""
        if isinstance(self._value, dict):
            return list(self._value.keys())
        return []

    def items(self) -> Iterator[Tuple[str, "JsonNode"]]:
        if isinstance(self._value, dict):
            for k, v in self._value.items():
                yield k, JsonNode(v)

    def size(self) -> int:
        """Number of elements or fields; 0 for scalars."""
        if isinstance(self._value, (dict, list)):
            return len(self._value)
        return 0

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator["JsonNode"]:
        # elements of an array, values of an object
        if isinstance(self._value, dict):
            values = self._value.values()
        elif isinstance(self._value, list):
            values = self._value
        else:
            values = ()
        for v in values:
            yield JsonNode(v)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (str, int)):
            return self.has(key)
        return False

    def __getitem__(self, key: Key) -> "JsonNode":
        child = self._child(key)
        if child is _MISSING:
            raise KeyError(key)
        return JsonNode(child)

    # -----------------------------------------------------------------
    # Scalar conversion
    # -----------------------------------------------------------------
    def as_text(self) -> str:
        """Text form of a scalar; ``""`` for containers and missing nodes."""
        v = self._value
        if v is _MISSING or isinstance(v, (dict, list)):
            return ""
        if isinstance(v, str):
            return v
        return json.dumps(v)

    def as_int(self, default: int = 0) -> int:
        """Integer value, converting numbers, booleans and numeric text.

        Anything that cannot be converted yields ``default``.
        """
        v = self._value
        if isinstance(v, bool):
            return int(v)
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v)
        if isinstance(v, str):
            try:
                return int(v.strip())
            except ValueError:
                try:
                    return int(float(v))
                except ValueError:
                    return default
        return default

    def as_float(self, default: float = 0.0) -> float:
        v = self._value
        if isinstance(v, (bool, int, float)):
            return float(v)
        if isinstance(v, str):
            try:
                return float(v.strip())
            except ValueError:
                return default
        return default

    def as_bool(self, default: bool = False) -> bool:
        v = self._value
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return v != 0
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        return default

    # -----------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------
    def to_json(self) -> str:
        """Compact JSON text (empty string for a missing node)."""
        if self._value is _MISSING:
            return ""
        return json.dumps(self._value, ensure_ascii=False, separators=(",", ":"))

    def to_pretty_string(self) -> str:
        """Indented, multi-line JSON text."""
        if self._value is _MISSING:
            return ""
        return json.dumps(self._value, ensure_ascii=False, indent=2)

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        if self._value is _MISSING:
            return "JsonNode(<missing>)"
        return f"JsonNode({self.to_json()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonNode):
            return NotImplemented
        if self._value is _MISSING or other._value is _MISSING:
            return self._value is other._value
        return _strict_equal(self._value, other._value)

    def __hash__(self) -> int:
        return hash(self.to_json())


def _strict_equal(a: Any, b: Any) -> bool:
    # json distinguishes true from 1, Python does not
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_strict_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(_strict_equal(x, y) for x, y in zip(a, b))
    return a == b
