"""chunkprop info: show host store status and property counts."""

from __future__ import annotations

import os
from typing import Any

import typer

from chunkprop.cli import _exitcodes as ec
from chunkprop.cli._output import print_error, print_object
from chunkprop.cli._storage import close_store, open_engine
from chunkprop.host import parse_store_target


def info_cmd() -> None:
    """Show host store status, key counts and byte usage."""
    from chunkprop.cli import state

    target = parse_store_target(state.store)
    if target.backend == "sqlite":
        assert target.db_path is not None
        if target.db_path != ":memory:" and not os.path.exists(target.db_path):
            print_error(f"Database not found: {target.db_path}")
            raise typer.Exit(ec.STORE_ERROR)

    try:
        store, props = open_engine()
    except Exception as e:
        print_error(f"Cannot open host store: {e}")
        raise typer.Exit(ec.STORE_ERROR)

    try:
        keys = store.list_keys()
        data: dict[str, Any] = {
            **store.storage_info(),
            "store": target.uri,
            "namespace": state.namespace,
            "host_keys": len(keys),
            "properties": sum(1 for _ in props.ids(store)),
            "total_bytes": props.total_byte_count(store),
            "max_chunk_size": props.config.max_chunk_size,
        }
    finally:
        close_store(store)

    if state.json_output:
        print_object(data, json_mode=True)
        return

    print(f"Backend: {data['backend']}")
    print(f"Store: {data['store']}")
    if "db_path" in data:
        print(f"Database: {data['db_path']}")
    if "bucket" in data:
        print(f"Bucket: {data['bucket']}")
        print(f"Prefix: {data['prefix'] or '(none)'}")
    if state.namespace:
        print(f"Namespace: {state.namespace}")
    print(f"Host keys: {data['host_keys']}")
    print(f"Properties: {data['properties']}")
    print(f"Total bytes: {data['total_bytes']:,}")
    print(f"Max chunk size: {data['max_chunk_size']}")
