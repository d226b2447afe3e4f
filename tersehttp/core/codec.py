"""
core/codec.py
-------------

JSON decoding helpers shared by the outcome model and the request
builder.  Structural decoding goes through :class:`JsonNode`, typed
decoding through a pydantic ``TypeAdapter`` so that models, dataclasses,
TypedDicts and builtin generics (``list[int]``, ``dict[str, Any]``) are
all valid targets.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter

from tersehttp.json_node import JsonNode

T = TypeVar("T")


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def type_adapter(target: Any) -> TypeAdapter:
    """Return a (cached when possible) ``TypeAdapter`` for ``target``."""
    try:
        return _cached_adapter(target)
    except TypeError:
        # unhashable type expression, e.g. Annotated with list metadata
        return TypeAdapter(target)


def decode_as(text: str, target: Type[T]) -> T:
    """Decode JSON ``text`` into ``target``.

    :raises ValueError: on malformed JSON or a shape mismatch
        (``pydantic.ValidationError`` is a ``ValueError``)
    """
    if target is JsonNode:
        return JsonNode.parse(text)  # type: ignore[return-value]
    return type_adapter(target).validate_json(text)
