"""Structured error types for chunkprop."""

from __future__ import annotations

from typing import Any


class ChunkPropError(Exception):
    """Base error for all chunkprop errors."""


class InvalidSerializationResultError(ChunkPropError):
    """Raised when a serializer returns a value the host store cannot hold."""

    def __init__(self, property_id: str, result: Any) -> None:
        self.property_id = property_id
        self.result = result
        super().__init__(
            f"The serializer must return a valid dynamic property value for "
            f"'{property_id}'. Received: {result!r} ({type(result).__name__})."
        )


class CorruptChunkRunError(ChunkPropError):
    """Raised when a multi-chunk property holds a non-string fragment."""

    def __init__(self, property_id: str, chunk_key: str, value: Any) -> None:
        self.property_id = property_id
        self.chunk_key = chunk_key
        self.value = value
        super().__init__(
            f"Chunk '{chunk_key}' of '{property_id}' holds {type(value).__name__}; "
            "multi-chunk properties must consist of string fragments"
        )


class StorageBackendError(ChunkPropError):
    """Raised when host store operations fail."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage backend error during {operation}: {detail}")
