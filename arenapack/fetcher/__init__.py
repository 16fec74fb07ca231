"""Content resolution for arena sources: filesystem, artifacts, key-value stores."""

from arenapack.fetcher.archive import extract_tar_gz, normalize_entry_path
from arenapack.fetcher.download import fetch_artifact, rewrite_artifact_url
from arenapack.fetcher.filesystem import build_content_path, read_directory
from arenapack.fetcher.keyvalue import InMemoryKeyValueStore, KeyValueStore
from arenapack.fetcher.resolver import ContentResolver
from arenapack.fetcher.types import (
    ContentOrigin,
    RawFileMap,
    ResolvedContent,
    SourceDescriptor,
    StoreOptions,
)

__all__ = [
    # Types
    "ContentOrigin",
    "RawFileMap",
    "ResolvedContent",
    "SourceDescriptor",
    "StoreOptions",
    # Archive extraction
    "extract_tar_gz",
    "normalize_entry_path",
    # Artifact download
    "fetch_artifact",
    "rewrite_artifact_url",
    # Filesystem
    "build_content_path",
    "read_directory",
    # Key-value stores
    "KeyValueStore",
    "InMemoryKeyValueStore",
    # Resolution
    "ContentResolver",
]
