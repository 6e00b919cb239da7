"""In-process host store."""

from __future__ import annotations

from chunkprop.config import MAX_CHUNK_SIZE
from chunkprop.stores.base import check_entry
from chunkprop.values import SerializedValue, entry_byte_count


class MemoryStore:
    """Dict-backed host store; keys are listed in insertion order."""

    backend = "memory"

    def __init__(self, max_value_bytes: int = MAX_CHUNK_SIZE) -> None:
        self.max_value_bytes = max_value_bytes
        self._entries: dict[str, SerializedValue] = {}

    def read(self, key: str) -> SerializedValue:
        return self._entries.get(key)

    def write(self, key: str, value: SerializedValue = None) -> None:
        if value is None:
            self._entries.pop(key, None)
            return
        check_entry(key, value, self.max_value_bytes)
        self._entries[key] = value

    def list_keys(self) -> list[str]:
        return list(self._entries)

    def total_byte_count(self) -> int:
        return sum(entry_byte_count(k, v) for k, v in self._entries.items())

    def clear_all(self) -> None:
        self._entries.clear()

    def storage_info(self) -> dict[str, object]:
        return {"backend": self.backend, "max_value_bytes": self.max_value_bytes}

    def close(self) -> None:
        pass
