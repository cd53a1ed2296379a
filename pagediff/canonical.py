"""
Canonical form for JSON-LD values.

Two documents that carry the same structured data in a different key or
array order canonicalize to identical values, which is what makes the
positional structural diff meaningful.
"""

import json
from enum import Enum
from typing import Any

Json = Any


class JsonKind(Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Json) -> JsonKind:
    """
    Classify a decoded JSON value.

    ``bool`` is checked before numbers since it subclasses ``int``.
    Anything ``json.loads`` cannot produce is rejected.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Unsupported JSON type: {type(value).__name__}")


def stable_dumps(value: Json) -> str:
    """Compact, key-sorted serialization used as the array ordering key."""
    return json.dumps(value, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def canonicalize(value: Json) -> Json:
    """
    Return ``value`` with object keys sorted and arrays in total order.

    Arrays are sorted by the serialized form of their canonicalized
    elements, so any permutation of the same elements yields the same
    list. Scalars are returned unchanged.
    """
    kind = kind_of(value)

    if kind is JsonKind.OBJECT:
        return {key: canonicalize(value[key]) for key in sorted(value)}

    if kind is JsonKind.ARRAY:
        items = [canonicalize(item) for item in value]
        items.sort(key=stable_dumps)
        return items

    return value


def json_equal(lhs: Json, rhs: Json) -> bool:
    """Deep equality where ``True`` never equals ``1``."""
    kind = kind_of(lhs)
    if kind is not kind_of(rhs):
        return False

    if kind is JsonKind.OBJECT:
        return lhs.keys() == rhs.keys() and all(json_equal(lhs[k], rhs[k]) for k in lhs)

    if kind is JsonKind.ARRAY:
        return len(lhs) == len(rhs) and all(json_equal(a, b) for a, b in zip(lhs, rhs))

    return lhs == rhs
