"""Chunked property engine: large typed values on top of capped host entries."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, TypeVar, Union

from chunkprop.codec import Deserializer, Serializer, chunk_string, decode_ascii
from chunkprop.config import UNSET, ChunkPropConfig, _Unset
from chunkprop.errors import CorruptChunkRunError, InvalidSerializationResultError
from chunkprop.host import HostStore
from chunkprop.keys import (
    chunk_index_of,
    chunk_key,
    chunk_keys,
    namespaced_id,
    split_chunk_key,
    strip_namespace,
)
from chunkprop.values import SerializedValue, is_serialized_value

logger = logging.getLogger(__name__)

TOld = TypeVar("TOld")
TNew = TypeVar("TNew")

Namespace = Union[str, None, _Unset]


class DynamicProperties:
    """Store arbitrarily large values on a host store by splitting them into chunks.

    A logical property ``id`` is backed by host entries ``id_0 .. id_{n-1}``.
    String payloads are percent-escaped to ASCII and cut into windows of at most
    ``config.max_chunk_size`` bytes; any other primitive occupies chunk 0 alone.

    Every operation takes the owning host store first, so one engine can serve
    many stores:

        props = DynamicProperties(ChunkPropConfig(default_namespace="game"))
        props.set(world, "score", 9001)
        props.update(world, "score", lambda old: old + 1)
    """

    def __init__(self, config: ChunkPropConfig | None = None) -> None:
        self.config = config or ChunkPropConfig()

    # --- Id helpers ---

    def _namespace(self, namespace: Namespace) -> str | None:
        if isinstance(namespace, _Unset):
            return self.config.default_namespace
        return namespace

    def _full_id(self, property_id: str, namespace: Namespace) -> str:
        return namespaced_id(
            property_id, self._namespace(namespace), self.config.namespace_separator
        )

    def _chunk_keys(self, owner: HostStore, full_id: str) -> list[str]:
        return chunk_keys(owner, full_id, self.config.chunk_separator)

    def _write_chunk(
        self, owner: HostStore, full_id: str, index: int, chunk: SerializedValue
    ) -> None:
        owner.write(chunk_key(full_id, index, self.config.chunk_separator), chunk)

    def _remove_stale(self, owner: HostStore, previous: list[str], keep: int) -> int:
        """Delete previously existing chunks at indices >= *keep*."""
        removed = 0
        for key in previous:
            index = chunk_index_of(key, self.config.chunk_separator)
            if index is not None and index >= keep:
                owner.write(key, None)
                removed += 1
        return removed

    # --- Single property operations ---

    def get(
        self,
        owner: HostStore,
        property_id: str,
        *,
        deserialize: Deserializer | None = None,
        namespace: Namespace = UNSET,
        default: Any = None,
    ) -> Any:
        """Return the value of a property, or *default* if it has not been set."""
        full_id = self._full_id(property_id, namespace)
        keys = self._chunk_keys(owner, full_id)
        if not keys:
            return default

        value: SerializedValue
        if len(keys) == 1:
            value = owner.read(keys[0])
        else:
            fragments: list[str] = []
            for key in keys:
                chunk = owner.read(key)
                if not isinstance(chunk, str):
                    logger.warning("Corrupt chunk run for %s at %s", full_id, key)
                    raise CorruptChunkRunError(full_id, key, chunk)
                fragments.append(chunk)
            value = "".join(fragments)

        if isinstance(value, str):
            value = decode_ascii(value)

        return (deserialize or self.config.deserializer)(value, full_id)

    def exists(self, owner: HostStore, property_id: str, *, namespace: Namespace = UNSET) -> bool:
        """Return whether the property has at least one chunk on *owner*."""
        return self.chunk_count(owner, property_id, namespace=namespace) != 0

    def chunk_count(
        self, owner: HostStore, property_id: str, *, namespace: Namespace = UNSET
    ) -> int:
        """Return how many host entries back the property."""
        return len(self._chunk_keys(owner, self._full_id(property_id, namespace)))

    def delete(self, owner: HostStore, property_id: str, *, namespace: Namespace = UNSET) -> None:
        """Delete every chunk of the property."""
        full_id = self._full_id(property_id, namespace)
        keys = self._chunk_keys(owner, full_id)
        for key in keys:
            owner.write(key, None)
        if keys:
            logger.debug("Deleted %s (%d chunk(s))", full_id, len(keys))

    def set(
        self,
        owner: HostStore,
        property_id: str,
        value: Any,
        *,
        serialize: Serializer | None = None,
        namespace: Namespace = UNSET,
    ) -> None:
        """Set the value of a property. Passing None deletes it.

        Raises:
            InvalidSerializationResultError: the serializer returned something
                other than a host primitive. Nothing is written in that case.
        """
        if value is None:
            self.delete(owner, property_id, namespace=namespace)
            return

        full_id = self._full_id(property_id, namespace)
        serialized = (serialize or self.config.serializer)(value, full_id)
        if not is_serialized_value(serialized):
            raise InvalidSerializationResultError(full_id, serialized)
        if serialized is None:
            self.delete(owner, property_id, namespace=namespace)
            return

        previous = self._chunk_keys(owner, full_id)

        if isinstance(serialized, str):
            count = 0
            for chunk in chunk_string(serialized, self.config.max_chunk_size):
                self._write_chunk(owner, full_id, count, chunk)
                count += 1
            if count == 0:
                # "" still has to exist as a property
                self._write_chunk(owner, full_id, 0, "")
                count = 1
        else:
            # non-string primitives always fit in a single chunk
            self._write_chunk(owner, full_id, 0, serialized)
            count = 1

        removed = self._remove_stale(owner, previous, count)
        logger.debug("Wrote %s as %d chunk(s), removed %d stale", full_id, count, removed)

    def setdefault(
        self,
        owner: HostStore,
        property_id: str,
        value: Any,
        *,
        serialize: Serializer | None = None,
        deserialize: Deserializer | None = None,
        namespace: Namespace = UNSET,
    ) -> Any:
        """Set the property only if it does not exist yet; return the stored value."""
        if not self.exists(owner, property_id, namespace=namespace):
            self.set(owner, property_id, value, serialize=serialize, namespace=namespace)
        return self.get(owner, property_id, deserialize=deserialize, namespace=namespace)

    def update(
        self,
        owner: HostStore,
        property_id: str,
        updater: Callable[[TOld | None], TNew],
        *,
        serialize: Serializer | None = None,
        deserialize: Deserializer | None = None,
        namespace: Namespace = UNSET,
    ) -> TNew:
        """Replace the property's value with ``updater(old)`` and return the new value.

        ``old`` is None when the property does not exist. Returning None from the
        updater deletes the property.
        """
        old = self.get(owner, property_id, deserialize=deserialize, namespace=namespace)
        new = updater(old)
        self.set(owner, property_id, new, serialize=serialize, namespace=namespace)
        return new

    # --- Enumeration ---

    def ids(self, owner: HostStore, *, namespace: Namespace = UNSET) -> Iterator[str]:
        """Iterate the distinct property ids stored on *owner*.

        With a namespace (per call or the configured default), only ids inside it
        are produced, relative to it, so they can be passed back with the same
        ``namespace``. Order follows the host's key listing.
        """
        ns = self._namespace(namespace)
        seen: set[str] = set()
        for key in owner.list_keys():
            parts = split_chunk_key(key, self.config.chunk_separator)
            if parts is None:
                continue
            full_id = parts[0]
            if full_id in seen:
                continue
            property_id = strip_namespace(full_id, ns, self.config.namespace_separator)
            if property_id is None:
                continue
            seen.add(full_id)
            yield property_id

    def values(
        self,
        owner: HostStore,
        *,
        namespace: Namespace = UNSET,
        deserialize: Deserializer | None = None,
    ) -> Iterator[Any]:
        for property_id in self.ids(owner, namespace=namespace):
            yield self.get(owner, property_id, deserialize=deserialize, namespace=namespace)

    def entries(
        self,
        owner: HostStore,
        *,
        namespace: Namespace = UNSET,
        deserialize: Deserializer | None = None,
    ) -> Iterator[tuple[str, Any]]:
        for property_id in self.ids(owner, namespace=namespace):
            yield (
                property_id,
                self.get(owner, property_id, deserialize=deserialize, namespace=namespace),
            )

    # --- Whole-store operations ---

    def clear(self, owner: HostStore, *, namespace: Namespace = UNSET) -> int:
        """Delete every property (in the namespace, if one is active).

        Host entries that are not chunk keys are left alone. Returns the number
        of properties deleted.
        """
        ns = self._namespace(namespace)
        property_ids = list(self.ids(owner, namespace=ns))
        for property_id in property_ids:
            self.delete(owner, property_id, namespace=ns)
        return len(property_ids)

    def total_byte_count(self, owner: HostStore) -> int:
        return owner.total_byte_count()
