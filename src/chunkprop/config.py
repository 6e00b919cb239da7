"""Configuration for chunkprop engines and host stores."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any

from chunkprop.codec import Deserializer, Serializer, json_deserialize, json_serialize

MAX_CHUNK_SIZE = 32767


class _Unset(enum.Enum):
    UNSET = "UNSET"


# Marks a keyword option the caller did not pass, so ``None`` can mean "no namespace".
UNSET = _Unset.UNSET


@dataclass
class ChunkPropConfig:
    """Configuration for a DynamicProperties engine."""

    max_chunk_size: int = MAX_CHUNK_SIZE
    chunk_separator: str = "_"
    namespace_separator: str = ":"
    default_namespace: str | None = None
    serializer: Serializer = json_serialize
    deserializer: Deserializer = json_deserialize
    s3_region: str | None = None
    s3_endpoint_url: str | None = None
    s3_request_timeout_s: float = 10.0

    def __post_init__(self) -> None:
        if len(self.chunk_separator) != 1:
            raise ValueError(
                f"chunk_separator must be a single character, got {self.chunk_separator!r}"
            )
        if not self.namespace_separator:
            raise ValueError("namespace_separator must not be empty")
        if self.max_chunk_size < 3:
            raise ValueError(f"max_chunk_size must be at least 3, got {self.max_chunk_size}")

    def replace(self, **overrides: Any) -> ChunkPropConfig:
        """Return a copy with *overrides* applied (validated again)."""
        return dataclasses.replace(self, **overrides)
