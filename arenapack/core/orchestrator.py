"""Service that turns an arena config's source into a typed content view.

Pipeline, per call and with no caching between calls:

    resolve -> classify files & build tree -> locate entry point
            -> normalize typed files -> assemble ArenaConfigContent

A config without content (no source, missing source, nothing synced yet)
yields an empty ArenaConfigContent named after the reason, not an error.
"""

import logging

from arenapack.constants import (
    NO_CONTENT_AVAILABLE,
    NO_SOURCE,
    SOURCE_NOT_FOUND,
    SYSTEM_TEMPLATE_MAX_LENGTH,
)
from arenapack.core.catalog import ArenaCatalog
from arenapack.core.files import PackageFile, build_package_files
from arenapack.core.kinds import FileType
from arenapack.core.models import ArenaConfigContent, BundleFile, ContentMetadata
from arenapack.core.normalizers import normalize_files
from arenapack.core.tree import build_file_tree, find_shadowed_paths
from arenapack.exceptions import (
    BundleFileNotFoundError,
    NoContentError,
    NoSourceError,
    SourceNotFoundError,
)
from arenapack.fetcher.resolver import ContentResolver
from arenapack.fetcher.types import RawFileMap, ResolvedContent

logger = logging.getLogger(__name__)


def find_entry_points(files: list[PackageFile]) -> list[str]:
    """Return the paths of all arena files, in path order."""
    return [f.path for f in files if f.type is FileType.ARENA]


def build_content(
    files_data: RawFileMap,
    fallback_name: str,
    *,
    template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH,
) -> ArenaConfigContent:
    """Build the content view of a resolved, non-empty bundle.

    Args:
        files_data: Mapping of relative path to file content
        fallback_name: Name used when the arena file declares none
        template_max_length: Display cap for prompt system templates

    Returns:
        The assembled ArenaConfigContent
    """
    files = build_package_files(files_data)
    file_tree = build_file_tree(files)

    warnings: list[str] = []
    entry_points = find_entry_points(files)
    entry_point = entry_points[0] if entry_points else None
    if len(entry_points) > 1:
        message = (
            f"Multiple arena files found, using '{entry_point}'; "
            f"ignored: {', '.join(entry_points[1:])}"
        )
        logger.warning(message)
        warnings.append(message)

    for path in find_shadowed_paths(f.path for f in files):
        warnings.append(f"'{path}' is nested under a file and is left out of the tree")

    parsed = normalize_files(
        files, files_data, entry_point, template_max_length=template_max_length
    )
    arena = parsed.arena

    content = ArenaConfigContent(
        metadata=ContentMetadata(
            name=(arena.name if arena and arena.name else fallback_name),
            namespace=arena.namespace if arena else None,
        ),
        files=files,
        file_tree=file_tree,
        entry_point=entry_point,
        prompt_configs=parsed.prompt_configs,
        providers=parsed.providers,
        scenarios=parsed.scenarios,
        tools=parsed.tools,
        warnings=warnings,
    )
    if arena:
        content.mcp_servers = arena.mcp_servers
        content.judges = arena.judges
        content.judge_defaults = arena.judge_defaults
        content.self_play = arena.self_play
        content.defaults = arena.defaults

    return content


class ContentService:
    """Loads arena config content through a catalog and a resolver."""

    def __init__(
        self,
        catalog: ArenaCatalog,
        resolver: ContentResolver,
        *,
        template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH,
    ) -> None:
        """Initialize the service.

        Args:
            catalog: Lookup of arena config and source records
            resolver: Content resolver with its clients already attached
            template_max_length: Display cap for prompt system templates
        """
        self._catalog = catalog
        self._resolver = resolver
        self._template_max_length = template_max_length

    @property
    def resolver(self) -> ContentResolver:
        return self._resolver

    def _resolve(
        self, workspace: str, namespace: str, config_name: str
    ) -> tuple[ResolvedContent | None, str | None]:
        """Resolve a config's files.

        Returns:
            (content, None) on success, or (None, reason) when the config
            has no usable source
        """
        config = self._catalog.get_config(workspace, namespace, config_name)
        if not config.source_ref:
            return None, NO_SOURCE

        source = self._catalog.get_source(workspace, namespace, config.source_ref)
        if source is None:
            return None, SOURCE_NOT_FOUND

        resolved = self._resolver.resolve(workspace, namespace, source)
        if resolved.is_empty:
            return None, NO_CONTENT_AVAILABLE

        logger.debug(
            "Resolved %d files for '%s' from %s",
            len(resolved.files), config_name, resolved.origin.value,
        )
        return resolved, None

    def get_content(
        self, workspace: str, namespace: str, config_name: str
    ) -> ArenaConfigContent:
        """Load the full content view of an arena config.

        Args:
            workspace: Owning workspace name
            namespace: Storage namespace of the workspace
            config_name: Arena config to load

        Returns:
            The content view; an empty view named "No source",
            "Source not found" or "No content available" if there is
            nothing to load

        Raises:
            ArenaConfigNotFoundError: If the arena config doesn't exist
        """
        resolved, reason = self._resolve(workspace, namespace, config_name)
        if resolved is None:
            logger.info("Arena config '%s' has no content: %s", config_name, reason)
            return ArenaConfigContent.empty(reason or NO_CONTENT_AVAILABLE)

        content = build_content(
            resolved.files, config_name, template_max_length=self._template_max_length
        )
        logger.info("Loaded arena config '%s': %s", config_name, content.summary())
        return content

    def get_file(
        self, workspace: str, namespace: str, config_name: str, path: str
    ) -> BundleFile:
        """Read a single file of an arena config's bundle.

        Args:
            workspace: Owning workspace name
            namespace: Storage namespace of the workspace
            config_name: Arena config the file belongs to
            path: Bundle-relative path of the file

        Returns:
            The file with its content

        Raises:
            ArenaConfigNotFoundError: If the arena config doesn't exist
            NoSourceError: If the config declares no source
            SourceNotFoundError: If the declared source doesn't exist
            NoContentError: If the source has no content
            BundleFileNotFoundError: If the path is not in the bundle
        """
        resolved, reason = self._resolve(workspace, namespace, config_name)
        if resolved is None:
            if reason == NO_SOURCE:
                raise NoSourceError(f"No source configured for arena config '{config_name}'")
            if reason == SOURCE_NOT_FOUND:
                raise SourceNotFoundError(
                    f"Source for arena config '{config_name}' not found"
                )
            raise NoContentError(f"No content available for arena config '{config_name}'")

        normalized = path.lstrip("/")
        if normalized not in resolved.files:
            raise BundleFileNotFoundError(f"File not found: {path}")
        return BundleFile(path=normalized, content=resolved.files[normalized])
