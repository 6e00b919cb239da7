"""chunkprop: arbitrarily large typed values on capped key-value host stores."""

__version__ = "0.1.0"

from chunkprop.codec import (
    Deserializer,
    Serializer,
    json_deserialize,
    json_serialize,
    model_codec,
    raw_deserialize,
    raw_serialize,
)
from chunkprop.config import UNSET, ChunkPropConfig
from chunkprop.engine import DynamicProperties
from chunkprop.errors import (
    ChunkPropError,
    CorruptChunkRunError,
    InvalidSerializationResultError,
    StorageBackendError,
)
from chunkprop.host import HostStore, open_store, parse_store_target, supports_host_store
from chunkprop.values import SerializedValue, Vector3, is_serialized_value

__all__ = [
    "__version__",
    "DynamicProperties",
    "ChunkPropConfig",
    "UNSET",
    "HostStore",
    "supports_host_store",
    "open_store",
    "parse_store_target",
    "Serializer",
    "Deserializer",
    "json_serialize",
    "json_deserialize",
    "raw_serialize",
    "raw_deserialize",
    "model_codec",
    "SerializedValue",
    "Vector3",
    "is_serialized_value",
    "ChunkPropError",
    "CorruptChunkRunError",
    "InvalidSerializationResultError",
    "StorageBackendError",
]
