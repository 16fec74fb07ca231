"""Extraction of gzipped tar artifacts into in-memory file maps."""

import gzip
import io
import logging
import tarfile
import zlib

from arenapack.exceptions import ArchiveExtractionError
from arenapack.fetcher.types import RawFileMap

logger = logging.getLogger(__name__)


def normalize_entry_path(name: str) -> str:
    """Strip a single leading "./" or "/" from an archive member name."""
    if name.startswith("./"):
        return name[2:]
    if name.startswith("/"):
        return name[1:]
    return name


def extract_tar_gz(data: bytes) -> RawFileMap:
    """Unpack a gzipped tar artifact into a path -> text mapping.

    The gzip layer is decompressed in full first so that its CRC and length
    trailer are verified. The tar stream is then read member by member. Only
    regular files are kept; directories, links and device entries are
    dropped. Member payloads are decoded as UTF-8.

    Args:
        data: Raw bytes of the .tar.gz artifact

    Returns:
        Mapping of normalized relative path to file content

    Raises:
        ArchiveExtractionError: If the payload is not valid gzip or the tar
            stream is corrupt or truncated anywhere. No partial map is
            returned in that case.
    """
    files: RawFileMap = {}

    try:
        raw = gzip.decompress(data)
        with tarfile.open(fileobj=io.BytesIO(raw), mode="r|") as tar:
            for member in tar:
                if not member.isfile():
                    continue

                path = normalize_entry_path(member.name)
                if not path or path.endswith("/"):
                    continue

                handle = tar.extractfile(member)
                if handle is None:
                    continue
                payload = handle.read()
                files[path] = payload.decode("utf-8", errors="replace")

            # tarfile stops quietly at a bad header after the first member;
            # anything but zero padding past that point is corruption.
            if raw[tar.offset:].strip(b"\0"):
                raise ArchiveExtractionError(
                    f"Failed to extract artifact: invalid tar header at offset {tar.offset}"
                )
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract artifact: {e}") from e

    logger.debug("Extracted %d files from artifact", len(files))
    return files
