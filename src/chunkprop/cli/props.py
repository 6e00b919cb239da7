"""chunkprop ids/get/set/delete/clear/dump: property commands."""

from __future__ import annotations

import json

import typer

from chunkprop.cli import _exitcodes as ec
from chunkprop.cli._output import print_error, print_object, print_table, to_json, to_yaml
from chunkprop.cli._storage import close_store, open_engine
from chunkprop.errors import ChunkPropError, InvalidSerializationResultError


def _open():
    try:
        return open_engine()
    except Exception as e:
        print_error(f"Cannot open host store: {e}")
        raise typer.Exit(ec.STORE_ERROR)


def ids_cmd(
    with_chunks: bool = typer.Option(
        False, "--chunks", "-c", help="Show how many host entries back each id"
    ),
) -> None:
    """List property ids."""
    from chunkprop.cli import state

    store, props = _open()
    try:
        found = list(props.ids(store))
        rows = [[pid, props.chunk_count(store, pid)] for pid in found] if with_chunks else []
    finally:
        close_store(store)

    if with_chunks:
        print_table(["id", "chunks"], rows, json_mode=state.json_output)
        return
    if state.json_output:
        print(to_json(found))
        return
    for property_id in found:
        print(property_id)


def get_cmd(property_id: str = typer.Argument(..., help="Property id")) -> None:
    """Print the value of a property as JSON."""
    store, props = _open()
    try:
        if not props.exists(store, property_id):
            print_error(f"Property not found: {property_id}")
            raise typer.Exit(ec.NOT_FOUND)
        value = props.get(store, property_id)
    except ChunkPropError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        close_store(store)
    print(to_json(value))


def set_cmd(
    property_id: str = typer.Argument(..., help="Property id"),
    value: str = typer.Argument(..., help="JSON value (or plain text with --string)"),
    as_string: bool = typer.Option(False, "--string", help="Store VALUE as a plain string"),
) -> None:
    """Set a property from a JSON value."""
    if as_string:
        parsed: object = value
    else:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            print_error(f"VALUE is not valid JSON ({e}); pass --string to store text")
            raise typer.Exit(ec.USAGE_ERROR)

    store, props = _open()
    try:
        props.set(store, property_id, parsed)
        chunks = props.chunk_count(store, property_id)
    except InvalidSerializationResultError as e:
        print_error(str(e))
        raise typer.Exit(ec.SERIALIZATION_ERROR)
    except ChunkPropError as e:
        print_error(str(e))
        raise typer.Exit(ec.STORE_ERROR)
    finally:
        close_store(store)

    if parsed is None:
        print(f"Deleted {property_id}")
    else:
        print(f"Set {property_id} ({chunks} chunk(s))")


def delete_cmd(property_id: str = typer.Argument(..., help="Property id")) -> None:
    """Delete a property and all of its chunks."""
    store, props = _open()
    try:
        existed = props.exists(store, property_id)
        props.delete(store, property_id)
    finally:
        close_store(store)
    if not existed:
        print_error(f"Property not found: {property_id}")
        raise typer.Exit(ec.NOT_FOUND)
    print(f"Deleted {property_id}")


def clear_cmd(
    all_keys: bool = typer.Option(
        False, "--all", help="Clear every host entry, including unmanaged keys"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every property (in the selected namespace)."""
    from chunkprop.cli import state

    if not yes:
        scope = "ALL host entries" if all_keys else "all properties"
        if state.namespace and not all_keys:
            scope += f" in namespace '{state.namespace}'"
        typer.confirm(f"Delete {scope} from {state.store}?", abort=True)

    store, props = _open()
    try:
        if all_keys:
            store.clear_all()
            print("Cleared host store")
        else:
            removed = props.clear(store)
            print(f"Deleted {removed} propert{'y' if removed == 1 else 'ies'}")
    finally:
        close_store(store)


def dump_cmd(
    fmt: str = typer.Option("json", "--format", help="Output format: json or yaml"),
) -> None:
    """Dump every property as an id -> value mapping."""
    if fmt not in ("json", "yaml"):
        print_error(f"Unsupported format '{fmt}' (expected json or yaml)")
        raise typer.Exit(ec.USAGE_ERROR)

    store, props = _open()
    try:
        data = dict(props.entries(store))
    except ChunkPropError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        close_store(store)

    if fmt == "yaml":
        print(to_yaml(data), end="")
    else:
        print_object(data, json_mode=True)
