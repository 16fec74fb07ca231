"""Key-value (ConfigMap style) content stores.

A store hands back a bundle as already-decoded path -> content pairs. The
real cluster client is built once by the caller and passed into the
resolver; this module only defines the interface and an in-memory store.
"""

from typing import Mapping, Protocol

from arenapack.fetcher.types import RawFileMap, StoreOptions


class KeyValueStore(Protocol):
    """Read access to named key-value entries."""

    def get_content(self, options: StoreOptions, name: str) -> RawFileMap | None:
        """Return the entries stored under name, or None if there is no such store."""
        ...


class InMemoryKeyValueStore:
    """Key-value store backed by a plain mapping of store name to entries."""

    def __init__(self, stores: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._stores = {name: dict(entries) for name, entries in (stores or {}).items()}

    def get_content(self, options: StoreOptions, name: str) -> RawFileMap | None:
        entries = self._stores.get(name)
        if entries is None:
            return None
        return dict(entries)
