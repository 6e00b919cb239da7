"""Tests for the chunked property engine: get/set/delete/exists/update."""

from __future__ import annotations

import logging

import pytest

from chunkprop import (
    ChunkPropConfig,
    CorruptChunkRunError,
    DynamicProperties,
    InvalidSerializationResultError,
    Vector3,
    raw_deserialize,
    raw_serialize,
)
from chunkprop.keys import chunk_keys
from chunkprop.stores import MemoryStore


def snapshot(store: MemoryStore) -> dict[str, object]:
    return {key: store.read(key) for key in store.list_keys()}


class TestRoundTrip:
    @pytest.mark.parametrize(
        "value",
        [
            0,
            9001,
            -3.25,
            True,
            False,
            "",
            "plain text",
            "ünïcödé ✓ 日本語 \U0001f600",
            [1, "two", 3.0, None, True],
            {"a": 1, "b": {"c": [1, 2, 3]}, "d": "é"},
        ],
    )
    def test_json_values(self, store, props, value):
        props.set(store, "example:value", value)
        assert props.get(store, "example:value") == value

    @pytest.mark.parametrize("value", [7, 2.5, True, "text", Vector3(1.0, -2.0, 0.5)])
    def test_raw_primitives(self, store, value):
        props = DynamicProperties(
            ChunkPropConfig(serializer=raw_serialize, deserializer=raw_deserialize)
        )
        props.set(store, "raw", value)
        assert props.get(store, "raw") == value
        assert store.list_keys() == ["raw_0"]

    def test_vector_with_json_codec_comes_back_as_mapping(self, store, props):
        props.set(store, "pos", Vector3(1, 2, 3))
        assert props.get(store, "pos") == {"x": 1, "y": 2, "z": 3}

    def test_large_value_spans_chunks(self, store, props):
        value = {"blob": "x" * 100_000}
        props.set(store, "big", value)
        assert props.chunk_count(store, "big") > 1
        for key in store.list_keys():
            assert len(store.read(key)) <= 32767
        assert props.get(store, "big") == value


class TestGet:
    def test_missing_returns_none(self, store, props):
        assert props.get(store, "nope") is None

    def test_missing_returns_default(self, store, props):
        assert props.get(store, "nope", default=42) == 42

    def test_per_call_deserializer(self, store, props):
        props.set(store, "n", 5)
        seen = []

        def deserialize(value, property_id):
            seen.append((value, property_id))
            return "custom"

        assert props.get(store, "n", deserialize=deserialize) == "custom"
        assert seen == [("5", "n")]

    def test_deserializer_receives_namespaced_id(self, store, props):
        props.set(store, "n", 5, namespace="game")
        seen = []
        props.get(store, "n", namespace="game", deserialize=lambda v, pid: seen.append(pid))
        assert seen == ["game:n"]

    def test_non_string_fragment_in_run_raises(self, store, props, caplog):
        store.write("x_0", "abc")
        store.write("x_1", 5)
        with caplog.at_level(logging.WARNING, logger="chunkprop.engine"):
            with pytest.raises(CorruptChunkRunError) as exc:
                props.get(store, "x")
        assert exc.value.chunk_key == "x_1"
        assert "Corrupt chunk run for x at x_1" in caplog.text

    def test_bare_host_key_is_invisible(self, store, props):
        store.write("plain", '"value"')
        assert props.get(store, "plain") is None
        assert not props.exists(store, "plain")

    def test_foreign_key_with_trailing_newline_is_ignored(self, store, props):
        store.write("id_0\n", "foreign")
        props.set(store, "id", "mine")
        assert props.get(store, "id") == "mine"
        props.set(store, "id", 5)
        assert props.get(store, "id") == 5
        assert store.read("id_0\n") == "foreign"


class TestSet:
    def test_chunk_layout(self, store, raw_props):
        raw_props.set(store, "s", "a€")
        assert snapshot(store) == {"s_0": "a%E2", "s_1": "%82", "s_2": "%AC"}
        assert raw_props.get(store, "s") == "a€"

    def test_multibyte_at_chunk_boundary(self, store, small_props):
        # '"abcd' fills 7 of 8 units, so the escaped é straddles the boundary
        value = "abcdéfgh€"
        small_props.set(store, "b", value)
        assert small_props.chunk_count(store, "b") > 2
        assert small_props.get(store, "b") == value

    def test_numeric_chunk_order(self, lex_store):
        props = DynamicProperties(
            ChunkPropConfig(max_chunk_size=3, serializer=raw_serialize, deserializer=raw_deserialize)
        )
        value = "abcdefghijklmnopqrstuvwxyz0123456789"
        props.set(lex_store, "id", value)

        assert props.chunk_count(lex_store, "id") == 12
        assert lex_store.list_keys()[:3] == ["id_0", "id_1", "id_10"]
        assert chunk_keys(lex_store, "id") == [f"id_{i}" for i in range(12)]
        assert props.get(lex_store, "id") == value

    def test_set_is_idempotent(self, store, small_props):
        small_props.set(store, "v", {"k": "some longer value"})
        once = snapshot(store)
        small_props.set(store, "v", {"k": "some longer value"})
        assert snapshot(store) == once

    def test_shrink_removes_stale_chunks(self, store, small_props):
        small_props.set(store, "v", "a long string that needs many chunks")
        assert small_props.chunk_count(store, "v") > 3
        small_props.set(store, "v", "hi")
        assert store.list_keys() == ["v_0"]
        assert small_props.get(store, "v") == "hi"

    def test_scalar_replaces_multi_chunk_string(self, store, raw_props):
        raw_props.set(store, "v", "abcdefghijkl")
        assert raw_props.chunk_count(store, "v") == 3
        raw_props.set(store, "v", 5)
        assert store.list_keys() == ["v_0"]
        assert raw_props.get(store, "v") == 5

    def test_grow_then_shrink_leaves_contiguous_run(self, store, small_props):
        small_props.set(store, "v", "x" * 40)
        small_props.set(store, "v", "y" * 12)
        indices = sorted(int(k.rsplit("_", 1)[1]) for k in store.list_keys())
        assert indices == list(range(len(indices)))

    def test_empty_string_still_exists(self, store, raw_props):
        raw_props.set(store, "e", "")
        assert raw_props.exists(store, "e")
        assert raw_props.get(store, "e") == ""

    def test_none_deletes(self, store, props):
        props.set(store, "v", 1)
        props.set(store, "v", None)
        assert not props.exists(store, "v")
        assert store.list_keys() == []

    def test_invalid_serialization_result(self, store, props):
        with pytest.raises(InvalidSerializationResultError) as exc:
            props.set(store, "v", 1, serialize=lambda value, pid: [value])
        assert exc.value.property_id == "v"
        assert store.list_keys() == []

    def test_invalid_serialization_keeps_previous_value(self, store, props):
        props.set(store, "v", 1)
        with pytest.raises(InvalidSerializationResultError):
            props.set(store, "v", 2, serialize=lambda value, pid: object())
        assert props.get(store, "v") == 1

    def test_serializer_returning_none_deletes(self, store, props):
        props.set(store, "v", "x")
        props.set(store, "v", "y", serialize=lambda value, pid: None)
        assert not props.exists(store, "v")

    def test_serializer_receives_full_id(self, store, props):
        seen = []

        def serialize(value, property_id):
            seen.append(property_id)
            return str(value)

        props.set(store, "v", 3, namespace="ns", serialize=serialize)
        assert seen == ["ns:v"]

    def test_logs_chunk_writes(self, store, small_props, caplog):
        with caplog.at_level(logging.DEBUG, logger="chunkprop.engine"):
            small_props.set(store, "v", "x" * 30)
        assert any("Wrote v as" in r.getMessage() for r in caplog.records)


class TestDeleteExists:
    def test_delete_removes_all_chunks(self, store, small_props):
        small_props.set(store, "v", "x" * 40)
        store.write("other_0", "keep")
        small_props.delete(store, "v")
        assert store.list_keys() == ["other_0"]

    def test_delete_missing_is_noop(self, store, props):
        props.delete(store, "missing")
        assert store.list_keys() == []

    def test_exists(self, store, props):
        assert not props.exists(store, "v")
        props.set(store, "v", False)
        assert props.exists(store, "v")


class TestUpdate:
    def test_increment(self, store, props):
        props.set(store, "counter", 9001)
        assert props.update(store, "counter", lambda old: old + 1) == 9002
        assert props.get(store, "counter") == 9002

    def test_missing_passes_none(self, store, props):
        result = props.update(store, "list", lambda old: (old or []) + ["a"])
        assert result == ["a"]
        assert props.get(store, "list") == ["a"]

    def test_returning_none_deletes(self, store, props):
        props.set(store, "v", 1)
        props.update(store, "v", lambda old: None)
        assert not props.exists(store, "v")


class TestSetDefault:
    def test_sets_when_missing(self, store, props):
        assert props.setdefault(store, "v", {"a": 1}) == {"a": 1}
        assert props.get(store, "v") == {"a": 1}

    def test_keeps_existing(self, store, props):
        props.set(store, "v", 1)
        assert props.setdefault(store, "v", 2) == 1
        assert props.get(store, "v") == 1


class TestConfiguration:
    def test_custom_separator(self, store):
        props = DynamicProperties(ChunkPropConfig(chunk_separator="#", max_chunk_size=4))
        props.set(store, "my_id", "abcdef")
        assert all(key.startswith("my_id#") for key in store.list_keys())
        assert props.get(store, "my_id") == "abcdef"
        assert list(props.ids(store)) == ["my_id"]

    def test_engines_are_isolated(self, store):
        a = DynamicProperties(ChunkPropConfig(default_namespace="a"))
        b = DynamicProperties(ChunkPropConfig(default_namespace="b"))
        a.set(store, "v", 1)
        b.set(store, "v", 2)
        assert a.get(store, "v") == 1
        assert b.get(store, "v") == 2

    def test_config_default_serializer(self, store):
        props = DynamicProperties(
            ChunkPropConfig(
                serializer=lambda value, pid: f"<{value}>",
                deserializer=lambda value, pid: value.strip("<>"),
            )
        )
        props.set(store, "v", "x")
        assert store.read("v_0") == "%3Cx%3E"
        assert props.get(store, "v") == "x"

    def test_total_byte_count(self, store, props):
        props.set(store, "v", 1)
        assert props.total_byte_count(store) == store.total_byte_count() > 0
