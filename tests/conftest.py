"""Shared test fixtures for chunkprop tests."""

from __future__ import annotations

import pytest

from chunkprop import ChunkPropConfig, DynamicProperties, raw_deserialize, raw_serialize
from chunkprop.stores import MemoryStore, SQLiteStore


class LexicographicStore(MemoryStore):
    """Memory store that lists keys sorted as strings, like most real hosts."""

    def list_keys(self) -> list[str]:
        return sorted(super().list_keys())


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def lex_store():
    return LexicographicStore()


@pytest.fixture
def props():
    return DynamicProperties()


@pytest.fixture
def raw_props():
    """Engine that stores primitives unchanged, with tiny chunks."""
    return DynamicProperties(
        ChunkPropConfig(max_chunk_size=4, serializer=raw_serialize, deserializer=raw_deserialize)
    )


@pytest.fixture
def small_props():
    """JSON engine with tiny chunks so short values span many chunks."""
    return DynamicProperties(ChunkPropConfig(max_chunk_size=8))


@pytest.fixture
def tmp_db(tmp_path):
    """Create a temporary SQLite database path."""
    return str(tmp_path / "props.db")


@pytest.fixture
def sqlite_store(tmp_db):
    s = SQLiteStore(tmp_db)
    yield s
    s.close()
