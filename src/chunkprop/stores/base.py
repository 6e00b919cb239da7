"""Entry validation shared by the host store adapters."""

from __future__ import annotations

from chunkprop.config import MAX_CHUNK_SIZE
from chunkprop.errors import StorageBackendError
from chunkprop.values import SerializedValue, is_serialized_value, value_byte_count


def check_entry(key: str, value: SerializedValue, max_value_bytes: int = MAX_CHUNK_SIZE) -> None:
    """Reject entries a capped host store could not hold."""
    if not isinstance(key, str) or not key:
        raise StorageBackendError("write", f"Keys must be non-empty strings, got {key!r}")
    if not is_serialized_value(value):
        raise StorageBackendError(
            "write", f"Unsupported value type {type(value).__name__} for '{key}'"
        )
    size = value_byte_count(value)
    if size > max_value_bytes:
        raise StorageBackendError(
            "write", f"Value for '{key}' is {size} bytes, exceeding the {max_value_bytes} byte limit"
        )
