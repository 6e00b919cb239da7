"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from chunkprop import DynamicProperties
from chunkprop.cli import app
from chunkprop.stores import SQLiteStore

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db(tmp_path):
    """Create a temp DB path for the CLI store."""
    return str(tmp_path / "cli_test.db")


@pytest.fixture
def seeded_db(cli_db):
    """Create a store with some seed properties."""
    store = SQLiteStore(cli_db)
    props = DynamicProperties()
    props.set(store, "greeting", "héllo")
    props.set(store, "game:score", 9001)
    props.set(store, "game:inventory", {"items": ["sword", "shield"]})
    store.write("foreign", "unmanaged")
    store.close()
    return cli_db


def invoke(runner: CliRunner, args: list[str], db_path: str | None = None) -> "Result":
    """Invoke CLI with the store option injected before the subcommand."""
    if db_path:
        args = ["--store", f"sqlite:///{db_path}"] + args
    return runner.invoke(app, args, catch_exceptions=False)
