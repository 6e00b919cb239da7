"""Physical chunk key derivation and parsing."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chunkprop.host import HostStore


def key_pattern(template: str, *values: Any) -> re.Pattern[str]:
    """Compile *template*, escaping each interpolated value.

    ``{}`` placeholders are filled positionally with ``re.escape(str(value))``;
    everything else in the template is regex syntax.

    >>> key_pattern("^{}_[0-9]+$", "a.b").pattern
    '^a\\\\.b_[0-9]+$'
    """
    parts = template.split("{}")
    if len(parts) - 1 != len(values):
        raise ValueError(
            f"Template has {len(parts) - 1} placeholder(s) but {len(values)} value(s) given"
        )
    out = [parts[0]]
    for value, literal in zip(values, parts[1:]):
        out.append(re.escape(str(value)))
        out.append(literal)
    return re.compile("".join(out))


def chunk_key(property_id: str, index: int, separator: str = "_") -> str:
    """Build the physical key of chunk *index* of *property_id*."""
    if index < 0:
        raise ValueError(f"Chunk index must be non-negative, got {index}")
    return f"{property_id}{separator}{index}"


def split_chunk_key(physical_key: str, separator: str = "_") -> tuple[str, int] | None:
    """Split a physical key into ``(property_id, index)``.

    Returns None for keys without the separator or whose suffix after the last
    separator is not a plain decimal integer; those belong to someone else.
    """
    idx = physical_key.rfind(separator)
    if idx == -1:
        return None
    suffix = physical_key[idx + len(separator) :]
    if not suffix or not (suffix.isascii() and suffix.isdigit()):
        return None
    return physical_key[:idx], int(suffix)


def chunk_index_of(physical_key: str, separator: str = "_") -> int | None:
    parts = split_chunk_key(physical_key, separator)
    return parts[1] if parts is not None else None


def chunk_keys(owner: HostStore, property_id: str, separator: str = "_") -> list[str]:
    """Return the physical keys of *property_id*, ordered by chunk index.

    Host listings are usually lexicographic (``id_0, id_1, id_10, id_2``), so
    keys are sorted by their parsed integer index instead.
    """
    is_chunk = key_pattern("{}{}[0-9]+", property_id, separator)
    indexed = [
        (chunk_index_of(key, separator), key)
        for key in owner.list_keys()
        if is_chunk.fullmatch(key)
    ]
    return [key for _, key in sorted(indexed)]


def namespaced_id(property_id: str, namespace: str | None, separator: str = ":") -> str:
    if namespace is None:
        return property_id
    return f"{namespace}{separator}{property_id}"


def strip_namespace(property_id: str, namespace: str | None, separator: str = ":") -> str | None:
    """Return *property_id* relative to *namespace*, or None if it lies outside it."""
    if namespace is None:
        return property_id
    prefix = f"{namespace}{separator}"
    if not property_id.startswith(prefix):
        return None
    return property_id[len(prefix) :]
