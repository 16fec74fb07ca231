"""Lookup of arena config and arena source records.

The records themselves are stored elsewhere; a catalog is the read-only
view the content service needs of them.
"""

from dataclasses import dataclass
from typing import Protocol

from arenapack.fetcher.types import SourceDescriptor


@dataclass(frozen=True)
class ArenaConfigRecord:
    """An arena config, reduced to what content loading needs."""

    name: str
    source_ref: str | None = None


class ArenaCatalog(Protocol):
    """Read access to arena config and arena source records."""

    def get_config(self, workspace: str, namespace: str, name: str) -> ArenaConfigRecord:
        """Return the named arena config.

        Raises:
            ArenaConfigNotFoundError: If there is no such config
        """
        ...

    def get_source(self, workspace: str, namespace: str, name: str) -> SourceDescriptor | None:
        """Return the named arena source, or None if it doesn't exist."""
        ...
