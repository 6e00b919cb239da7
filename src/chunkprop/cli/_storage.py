"""CLI helpers for host store and engine construction."""

from __future__ import annotations

import os

from chunkprop.config import MAX_CHUNK_SIZE, ChunkPropConfig
from chunkprop.engine import DynamicProperties
from chunkprop.host import HostStore, open_store


def _config_from_env() -> ChunkPropConfig:
    """Build engine config from CLI state and environment defaults."""
    from chunkprop.cli import state

    endpoint = os.getenv("CHUNKPROP_S3_ENDPOINT_URL") or os.getenv("CHUNKPROP_S3_ENDPOINT")
    region = os.getenv("CHUNKPROP_S3_REGION")
    max_chunk_size = int(os.getenv("CHUNKPROP_MAX_CHUNK_SIZE") or MAX_CHUNK_SIZE)
    separator = os.getenv("CHUNKPROP_CHUNK_SEPARATOR") or "_"
    return ChunkPropConfig(
        max_chunk_size=max_chunk_size,
        chunk_separator=separator,
        default_namespace=state.namespace,
        s3_region=region,
        s3_endpoint_url=endpoint,
    )


def open_engine() -> tuple[HostStore, DynamicProperties]:
    """Open the selected host store and an engine configured for it."""
    from chunkprop.cli import state

    config = _config_from_env()
    return open_store(state.store, config=config), DynamicProperties(config)


def close_store(store: HostStore) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        close()
