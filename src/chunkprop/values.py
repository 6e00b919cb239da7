"""Primitive value kinds accepted by host stores."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Vector3:
    """A 3-component numeric vector, the only structured host primitive."""

    x: float
    y: float
    z: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vector3:
        return cls(data["x"], data["y"], data["z"])


SerializedValue = Union[bool, int, float, str, Vector3, None]


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def is_serialized_value(x: Any) -> bool:
    """Return True when *x* is one of the primitive kinds a host store accepts.

    ``None`` counts: it is the absent value, and writing it deletes an entry.
    """
    if x is None or isinstance(x, (bool, str)):
        return True
    if _is_number(x):
        return True
    if isinstance(x, Vector3):
        return all(_is_number(c) for c in (x.x, x.y, x.z))
    return False


def value_kind(value: SerializedValue) -> str:
    """Name the primitive kind of *value* (``bool``, ``number``, ``string``, ``vector``)."""
    if isinstance(value, bool):
        return "bool"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Vector3):
        return "vector"
    raise TypeError(f"Not a host primitive: {value!r}")


def encode_primitive(value: SerializedValue) -> tuple[str, str]:
    """Encode a non-None primitive as ``(kind, value_json)`` for text-backed stores."""
    kind = value_kind(value)
    if kind == "vector":
        assert isinstance(value, Vector3)
        return kind, json.dumps(value.to_dict(), separators=(",", ":"))
    return kind, json.dumps(value)


def decode_primitive(kind: str, value_json: str) -> SerializedValue:
    """Reverse of :func:`encode_primitive`."""
    data = json.loads(value_json)
    if kind == "vector":
        return Vector3.from_dict(data)
    return data


def entry_byte_count(key: str, value: SerializedValue) -> int:
    """Approximate bytes an entry occupies: UTF-8 key plus the value's payload."""
    size = len(key.encode("utf-8"))
    if isinstance(value, bool):
        return size + 1
    if _is_number(value):
        return size + 8
    if isinstance(value, str):
        return size + len(value.encode("utf-8"))
    if isinstance(value, Vector3):
        return size + 24
    return size


def value_byte_count(value: SerializedValue) -> int:
    """Bytes counted against a host store's per-entry cap."""
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    return entry_byte_count("", value)
