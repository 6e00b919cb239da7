"""Example 01: Basic Usage - chunkprop Fundamentals.

This example demonstrates the fundamental operations:
- Creating an engine with DynamicProperties()
- Storing JSON values with props.set() and reading them with props.get()
- Incrementing a counter with props.update()
- Namespaced properties and enumeration with props.ids() / props.entries()
"""

from chunkprop import ChunkPropConfig, DynamicProperties
from chunkprop.stores import MemoryStore


def main():
    """Run the basic usage example."""
    print("=" * 80)
    print("CHUNKPROP BASIC USAGE EXAMPLE")
    print("=" * 80)

    # Step 1: Pick a host store.
    # Any object with read/write/list_keys/total_byte_count/clear_all works.
    world = MemoryStore()

    # Step 2: Create an engine. Defaults live on its config.
    props = DynamicProperties(ChunkPropConfig(default_namespace="example"))

    # Step 3: Store and read values.
    props.set(world, "number", 9001)
    props.set(world, "object", {"a": 1, "b": True})
    print(f"number -> {props.get(world, 'number')}")
    print(f"object -> {props.get(world, 'object')}")

    # Step 4: Adjust a value in place.
    new_value = props.update(world, "number", lambda old: old + 1)
    print(f"number after update -> {new_value}")

    # Step 5: Enumerate. Ids are relative to the active namespace.
    for property_id, value in props.entries(world):
        print(f"  {property_id}: {value}")

    # The host only sees chunk keys.
    print(f"host keys: {world.list_keys()}")

    # Step 6: Passing None deletes.
    props.set(world, "object", None)
    print(f"object exists -> {props.exists(world, 'object')}")


if __name__ == "__main__":
    main()
