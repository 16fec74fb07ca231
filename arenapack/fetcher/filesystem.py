"""Reading bundle content from the shared workspace content volume."""

import logging
from pathlib import Path

from arenapack.fetcher.types import RawFileMap

logger = logging.getLogger(__name__)


def build_content_path(
    content_root: Path | str,
    workspace: str,
    namespace: str,
    content_path: str,
) -> Path:
    """Build the on-volume directory of a source's synced content.

    Layout: {content_root}/{workspace}/{namespace}/{content_path}
    """
    return Path(content_root) / workspace / namespace / content_path.lstrip("/")


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def read_directory(root: Path) -> RawFileMap:
    """Recursively read every regular file below a directory.

    Hidden files and directories (any name starting with ".", such as the
    .arena metadata directory) are skipped along with everything under them.
    Keys are "/"-joined paths relative to root.

    A file or subdirectory that cannot be read is logged and left out. If
    root itself cannot be listed, an empty mapping is returned.

    Args:
        root: Directory to read

    Returns:
        Mapping of relative path to file content
    """
    files: RawFileMap = {}

    def _walk(directory: Path, prefix: tuple[str, ...]) -> None:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            if not prefix:
                raise
            logger.warning("Error reading directory %s: %s", directory, e)
            return

        for entry in entries:
            # Symlinks are neither followed nor read
            if _is_hidden(entry.name) or entry.is_symlink():
                continue

            segments = (*prefix, entry.name)
            if entry.is_dir():
                _walk(entry, segments)
            elif entry.is_file():
                try:
                    files["/".join(segments)] = entry.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning("Error reading file %s: %s", entry, e)

    try:
        _walk(root, ())
    except OSError as e:
        logger.warning("Error reading content directory %s: %s", root, e)
        return {}

    return files
