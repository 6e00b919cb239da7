"""Example 02: Large Values, Custom Codecs and Persistent Stores.

This example demonstrates:
- Values far beyond the host's 32767-byte entry limit
- Multi-byte text surviving chunk boundaries
- A pydantic model stored through model_codec()
- A SQLite-backed host store that survives restarts
"""

import tempfile
from pathlib import Path

from pydantic import BaseModel

from chunkprop import DynamicProperties, model_codec
from chunkprop.stores import SQLiteStore


class Profile(BaseModel):
    """A player profile."""

    name: str
    level: int = 1
    visited: list[str] = []


def main():
    """Run the large value example."""
    props = DynamicProperties()
    serialize, deserialize = model_codec(Profile)

    with tempfile.TemporaryDirectory() as tmp:
        db_path = str(Path(tmp) / "world.db")
        world = SQLiteStore(db_path)

        log = ["événement ✓ 日本"] * 10_000
        props.set(world, "game:log", log)
        print(f"game:log uses {props.chunk_count(world, 'game:log')} chunk(s)")

        profile = Profile(name="Steve", level=12, visited=["overworld", "nether"])
        props.set(world, "player:steve", profile, serialize=serialize)
        world.close()

        # Reopen: everything is reassembled from chunks.
        world = SQLiteStore(db_path)
        assert props.get(world, "game:log") == log
        print(f"profile -> {props.get(world, 'player:steve', deserialize=deserialize)!r}")
        print(f"ids in 'player' namespace -> {list(props.ids(world, namespace='player'))}")
        print(f"total bytes -> {props.total_byte_count(world):,}")
        world.close()


if __name__ == "__main__":
    main()
