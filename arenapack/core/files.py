"""Classified file listing for a bundle."""

from dataclasses import dataclass
from typing import Any, Mapping

from arenapack.core.kinds import FileType, classify_content


@dataclass(frozen=True)
class PackageFile:
    """A bundle file with its detected type.

    Content is deliberately not carried here; it is served per file.
    """

    path: str
    type: FileType
    size: int  # characters

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "type": self.type.value, "size": self.size}


def build_package_files(files: Mapping[str, str]) -> list[PackageFile]:
    """Classify every file and return the list sorted by path.

    Args:
        files: Mapping of relative path to file content

    Returns:
        One PackageFile per input path, in ascending path order
    """
    package_files = [
        PackageFile(path=path, type=classify_content(content), size=len(content))
        for path, content in files.items()
    ]
    return sorted(package_files, key=lambda f: f.path)
