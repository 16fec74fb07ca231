"""Directory tree synthesis from a flat, classified file list."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from arenapack.core.files import PackageFile
from arenapack.core.kinds import FileType

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    """A file or directory in the bundle tree.

    Directory nodes have children and no type; file nodes have a type and
    no children.
    """

    name: str
    path: str
    is_directory: bool
    type: FileType | None = None
    children: list["TreeNode"] | None = None

    @classmethod
    def directory(cls, name: str, path: str) -> "TreeNode":
        return cls(name=name, path=path, is_directory=True, children=[])

    @classmethod
    def file(cls, name: str, path: str, file_type: FileType) -> "TreeNode":
        return cls(name=name, path=path, is_directory=False, type=file_type)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "isDirectory": self.is_directory,
        }
        if self.type is not None:
            result["type"] = self.type.value
        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def _sort_key(node: TreeNode) -> tuple[bool, str]:
    # Directories first, then files; case-sensitive by name within each group
    return (not node.is_directory, node.name)


def _sort_children(nodes: list[TreeNode]) -> None:
    nodes.sort(key=_sort_key)
    for node in nodes:
        if node.children:
            _sort_children(node.children)


def build_file_tree(files: Iterable[PackageFile]) -> list[TreeNode]:
    """Build the nested directory tree for a list of files.

    Intermediate directories are created the first time a path prefix is
    seen and reused afterwards. Every level is then sorted with directories
    before files, each group by name.

    Args:
        files: Classified bundle files

    Returns:
        Top-level nodes of the tree
    """
    types_by_path = {f.path: f.type for f in files}
    root: list[TreeNode] = []
    nodes: dict[str, TreeNode] = {}

    for file_path in sorted(types_by_path):
        parts = file_path.split("/")
        current_path = ""

        for i, part in enumerate(parts):
            parent_path = current_path
            current_path = f"{current_path}/{part}" if current_path else part
            if current_path in nodes:
                continue

            parent = nodes[parent_path] if parent_path else None
            if parent is not None and parent.children is None:
                logger.warning(
                    "Leaving %s out of the tree: %s is a file", file_path, parent_path
                )
                break

            if i == len(parts) - 1:
                node = TreeNode.file(part, current_path, types_by_path[file_path])
            else:
                node = TreeNode.directory(part, current_path)
            nodes[current_path] = node

            if parent is not None and parent.children is not None:
                parent.children.append(node)
            else:
                root.append(node)

    _sort_children(root)
    return root


def find_shadowed_paths(paths: Iterable[str]) -> list[str]:
    """Return paths that sit below another path which is itself a file.

    Such paths can't be placed in the tree; build_file_tree leaves them out.
    """
    path_set = set(paths)
    shadowed = []
    for path in sorted(path_set):
        parts = path.split("/")
        if any("/".join(parts[:i]) in path_set for i in range(1, len(parts))):
            shadowed.append(path)
    return shadowed


def iter_nodes(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node of the tree, depth first."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def count_directories(nodes: Iterable[TreeNode]) -> int:
    """Count directory nodes in the tree."""
    return sum(1 for node in iter_nodes(nodes) if node.is_directory)
