"""chunkprop CLI: operator console for inspecting chunked properties on a host store."""

from __future__ import annotations

from typing import Optional

import typer

from chunkprop.cli import info, props

app = typer.Typer(
    name="chunkprop",
    help="chunkprop CLI: inspect and edit chunked properties on a host store.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    store: str = "sqlite:///chunkprop.db"
    namespace: str | None = None
    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        try:
            from importlib.metadata import version

            v = version("chunkprop")
        except Exception:
            v = "unknown"
        print(f"chunkprop {v}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    store: Optional[str] = typer.Option(
        None,
        "--store",
        envvar="CHUNKPROP_STORE",
        help="Host store URI (e.g. sqlite:///props.db, s3://bucket/prefix, memory://)",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        envvar="CHUNKPROP_NAMESPACE",
        help="Namespace applied to property ids",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all chunkprop commands."""
    from chunkprop.host import parse_store_target

    resolved_store = store or "sqlite:///chunkprop.db"
    try:
        parse_store_target(resolved_store)
    except Exception as e:
        raise typer.BadParameter(str(e))

    state.store = resolved_store
    state.namespace = namespace
    state.json_output = json_output
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


app.command(name="ids")(props.ids_cmd)
app.command(name="get")(props.get_cmd)
app.command(name="set")(props.set_cmd)
app.command(name="delete")(props.delete_cmd)
app.command(name="clear")(props.clear_cmd)
app.command(name="dump")(props.dump_cmd)
app.command(name="info")(info.info_cmd)


def main() -> None:
    """Entry point for the chunkprop CLI."""
    app()
