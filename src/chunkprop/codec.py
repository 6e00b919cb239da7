"""Value codecs and the byte-safe string transform used for chunking."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator, TypeVar
from urllib.parse import quote, unquote

from pydantic import BaseModel

from chunkprop.values import SerializedValue, Vector3

M = TypeVar("M", bound=BaseModel)

Serializer = Callable[[Any, str], SerializedValue]
Deserializer = Callable[[SerializedValue, str], Any]

# Characters left unescaped besides ASCII letters, digits and "_.-~".
# Same alphabet as ECMAScript's encodeURI.
URI_SAFE = ";,/?:@&=+$!*'()#"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Vector3):
        return obj.to_dict()
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def json_serialize(value: Any, property_id: str) -> SerializedValue:
    """Default serializer: compact JSON text.

    ``Vector3`` values and pydantic models are written as JSON objects, and
    :func:`json_deserialize` hands them back as plain dicts. Store vectors with
    :func:`raw_serialize`/:func:`raw_deserialize` and models with
    :func:`model_codec` to get the original type back.
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def json_deserialize(value: SerializedValue, property_id: str) -> Any:
    """Default deserializer: parse strings as JSON, pass other primitives through."""
    if isinstance(value, str):
        return json.loads(value)
    return value


def raw_serialize(value: Any, property_id: str) -> SerializedValue:
    """Store the value unchanged; it must already be a host primitive."""
    return value


def raw_deserialize(value: SerializedValue, property_id: str) -> Any:
    return value


def model_codec(model: type[M]) -> tuple[Serializer, Deserializer]:
    """Build a (serialize, deserialize) pair for a pydantic model type.

    Example:
        serialize, deserialize = model_codec(Profile)
        props.set(world, "player:profile", profile, serialize=serialize)
        props.get(world, "player:profile", deserialize=deserialize)
    """

    def serialize(value: M, property_id: str) -> SerializedValue:
        return value.model_dump_json()

    def deserialize(value: SerializedValue, property_id: str) -> M:
        if not isinstance(value, str):
            raise TypeError(
                f"Expected JSON text for {model.__name__} at '{property_id}', "
                f"got {type(value).__name__}"
            )
        return model.model_validate_json(value)

    return serialize, deserialize


# --- Byte-safe transform ---


def encode_ascii(text: str) -> str:
    """Percent-escape *text* so that every character of the result is one byte."""
    return quote(text, safe=URI_SAFE, errors="strict")


def decode_ascii(text: str) -> str:
    """Reverse of :func:`encode_ascii`."""
    return unquote(text, errors="strict")


def segment(encoded: str, size: int) -> Iterator[str]:
    """Yield windows of at most *size* characters without splitting ``%XX`` escapes."""
    if size < 3:
        raise ValueError(f"Chunk size must be at least 3, got {size}")

    start = 0
    length = len(encoded)
    while start < length:
        end = min(start + size, length)
        if end < length:
            if encoded[end - 1] == "%":
                end -= 1
            elif encoded[end - 2] == "%":
                end -= 2
        yield encoded[start:end]
        start = end


def chunk_string(text: str, size: int) -> Iterator[str]:
    """Encode *text* and lazily split it into host-sized chunks."""
    return segment(encode_ascii(text), size)
