"""Type definitions for the fetcher module."""

from dataclasses import dataclass, field
from enum import Enum

# Relative path ("prompts/greet.yaml") -> file text
RawFileMap = dict[str, str]


class ContentOrigin(Enum):
    """Where a bundle's files were read from."""

    FILESYSTEM = "filesystem"
    ARTIFACT = "artifact"
    CONFIG_MAP = "configmap"
    NONE = "none"


@dataclass(frozen=True)
class SourceDescriptor:
    """Locations an arena source may publish its content to.

    Any combination may be set; they are tried in the order declared here.
    """

    name: str
    content_path: str | None = None  # relative to the workspace content root
    artifact_url: str | None = None  # legacy tar.gz serving
    config_map: str | None = None  # key-value store name

    @property
    def has_location(self) -> bool:
        return bool(self.content_path or self.artifact_url or self.config_map)


@dataclass(frozen=True)
class StoreOptions:
    """Connection options handed to the key-value store."""

    workspace: str
    namespace: str


@dataclass(frozen=True)
class ResolvedContent:
    """Result of content resolution.

    An empty result is a normal outcome, not an error: the bundle may simply
    not have been synced yet.
    """

    files: RawFileMap = field(default_factory=dict)
    origin: ContentOrigin = ContentOrigin.NONE

    @classmethod
    def empty(cls) -> "ResolvedContent":
        """Return the "no content available" sentinel."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Return True if no location produced any file."""
        return not self.files
