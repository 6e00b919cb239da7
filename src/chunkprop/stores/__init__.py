"""Host store adapters implementing :class:`chunkprop.host.HostStore`."""

from chunkprop.stores.base import check_entry
from chunkprop.stores.memory import MemoryStore
from chunkprop.stores.sqlite import SQLiteStore

__all__ = ["MemoryStore", "SQLiteStore", "check_entry"]
