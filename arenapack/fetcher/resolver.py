"""Resolution of a source's content across its possible locations."""

import logging
from pathlib import Path

import httpx

from arenapack.constants import (
    IN_CLUSTER_ARTIFACT_URL,
    LOOPBACK_ARTIFACT_URL,
    WORKSPACE_CONTENT_ROOT,
)
from arenapack.fetcher.download import fetch_artifact
from arenapack.fetcher.filesystem import build_content_path, read_directory
from arenapack.fetcher.keyvalue import KeyValueStore
from arenapack.fetcher.types import (
    ContentOrigin,
    RawFileMap,
    ResolvedContent,
    SourceDescriptor,
    StoreOptions,
)

logger = logging.getLogger(__name__)


class ContentResolver:
    """Reads a source's files from the first location that has any.

    Locations are tried strictly in order and the first non-empty result
    wins; later locations are never touched once one succeeds:

    1. the shared workspace content volume (``content_path``)
    2. a legacy tar.gz artifact URL (``artifact_url``)
    3. a key-value store (``config_map``)

    The HTTP client and key-value store are owned by the caller and reused
    across calls.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        key_value_store: KeyValueStore | None = None,
        *,
        content_root: Path | str = WORKSPACE_CONTENT_ROOT,
        loopback_url: str = LOOPBACK_ARTIFACT_URL,
        service_url: str = IN_CLUSTER_ARTIFACT_URL,
    ) -> None:
        """Initialize the resolver.

        Args:
            http_client: Client for artifact downloads. Artifact URLs are
                skipped if None.
            key_value_store: Store for key-value sources. Store references
                are skipped if None.
            content_root: Root of the workspace content volume
            loopback_url: Loopback artifact base URL to rewrite
            service_url: In-cluster base URL it is rewritten to
        """
        self._http_client = http_client
        self._key_value_store = key_value_store
        self._content_root = Path(content_root)
        self._loopback_url = loopback_url
        self._service_url = service_url

    @property
    def content_root(self) -> Path:
        return self._content_root

    def resolve(
        self,
        workspace: str,
        namespace: str,
        source: SourceDescriptor,
    ) -> ResolvedContent:
        """Resolve a source's files.

        Args:
            workspace: Owning workspace name
            namespace: Storage namespace of the workspace
            source: Declared content locations

        Returns:
            ResolvedContent with the files and where they came from, or the
            empty sentinel if no location produced any file
        """
        if source.content_path:
            files = self._from_filesystem(workspace, namespace, source.content_path)
            if files:
                return ResolvedContent(files=files, origin=ContentOrigin.FILESYSTEM)

        if source.artifact_url:
            files = self._from_artifact(source.artifact_url)
            if files:
                return ResolvedContent(files=files, origin=ContentOrigin.ARTIFACT)

        if source.config_map:
            files = self._from_key_value_store(workspace, namespace, source.config_map)
            if files:
                return ResolvedContent(files=files, origin=ContentOrigin.CONFIG_MAP)

        logger.info("No content available for source '%s'", source.name)
        return ResolvedContent.empty()

    def _from_filesystem(
        self, workspace: str, namespace: str, content_path: str
    ) -> RawFileMap | None:
        base_path = build_content_path(self._content_root, workspace, namespace, content_path)
        if not base_path.exists():
            logger.warning("Filesystem content path not found: %s", base_path)
            return None

        logger.debug("Reading content from %s", base_path)
        return read_directory(base_path)

    def _from_artifact(self, url: str) -> RawFileMap | None:
        if self._http_client is None:
            logger.debug("No HTTP client configured, skipping artifact %s", url)
            return None

        logger.debug("Fetching artifact %s", url)
        return fetch_artifact(
            self._http_client,
            url,
            loopback_url=self._loopback_url,
            service_url=self._service_url,
        )

    def _from_key_value_store(
        self, workspace: str, namespace: str, name: str
    ) -> RawFileMap | None:
        if self._key_value_store is None:
            logger.debug("No key-value store configured, skipping '%s'", name)
            return None

        logger.debug("Reading key-value store '%s'", name)
        return self._key_value_store.get_content(
            StoreOptions(workspace=workspace, namespace=namespace), name
        )
