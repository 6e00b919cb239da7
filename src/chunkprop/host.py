"""Host store capability and backend selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

from chunkprop.config import ChunkPropConfig
from chunkprop.errors import StorageBackendError
from chunkprop.values import SerializedValue


@runtime_checkable
class HostStore(Protocol):
    """Flat key-value store with capped primitive entries.

    Writing ``None`` deletes an entry; reading a missing key returns ``None``.
    """

    def read(self, key: str) -> SerializedValue: ...

    def write(self, key: str, value: SerializedValue = None) -> None: ...

    def list_keys(self) -> list[str]: ...

    def total_byte_count(self) -> int: ...

    def clear_all(self) -> None: ...


def supports_host_store(obj: Any) -> bool:
    """Return True when *obj* exposes the full HostStore method set."""
    return isinstance(obj, HostStore)


@dataclass(frozen=True)
class StoreTarget:
    """Resolved host store target from a store URI."""

    backend: str
    uri: str
    db_path: str | None = None
    bucket: str | None = None
    prefix: str | None = None


def parse_store_target(store_uri: str) -> StoreTarget:
    """Resolve ``memory://``, ``sqlite:///path`` and ``s3://bucket/prefix`` URIs."""
    parsed = urlparse(store_uri)

    if parsed.scheme == "memory":
        return StoreTarget(backend="memory", uri=store_uri)

    if parsed.scheme == "sqlite":
        sqlite_path = parsed.path
        if parsed.netloc:
            sqlite_path = f"{parsed.netloc}{sqlite_path}"
        elif sqlite_path.startswith("//"):
            # sqlite:////abs/path -> /abs/path
            sqlite_path = sqlite_path[1:]
        if sqlite_path == "/:memory:":
            sqlite_path = ":memory:"
        if not sqlite_path:
            raise StorageBackendError("parse_store_uri", f"Invalid sqlite URI: {store_uri}")
        return StoreTarget(backend="sqlite", uri=store_uri, db_path=sqlite_path)

    if parsed.scheme == "s3":
        bucket = parsed.netloc
        prefix = parsed.path.lstrip("/").rstrip("/")
        if not bucket:
            raise StorageBackendError("parse_store_uri", f"Invalid s3 URI: {store_uri}")
        return StoreTarget(backend="s3", uri=store_uri, bucket=bucket, prefix=prefix)

    raise StorageBackendError(
        "parse_store_uri",
        f"Unsupported store URI scheme '{parsed.scheme}' for '{store_uri}'",
    )


def open_store(store_uri: str, *, config: ChunkPropConfig | None = None) -> HostStore:
    """Open a host store adapter for *store_uri*."""
    target = parse_store_target(store_uri)
    cfg = config or ChunkPropConfig()
    if target.backend == "memory":
        from chunkprop.stores.memory import MemoryStore

        return MemoryStore(max_value_bytes=cfg.max_chunk_size)
    if target.backend == "sqlite":
        from chunkprop.stores.sqlite import SQLiteStore

        assert target.db_path is not None
        return SQLiteStore(target.db_path, max_value_bytes=cfg.max_chunk_size)
    if target.backend == "s3":
        from chunkprop.stores.s3 import S3Store

        assert target.bucket is not None
        return S3Store(
            bucket=target.bucket,
            prefix=target.prefix or "",
            config=cfg,
        )
    raise StorageBackendError("open_store", f"Unsupported backend '{target.backend}'")
