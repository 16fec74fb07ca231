"""Core abstractions for arenapack.

This module provides classification, tree building, normalization and the
content service:

- FileType: Closed set of bundle file categories
- classify_content: Kind-based classification of a file
- PackageFile / build_package_files: Sorted, classified file list
- TreeNode / build_file_tree: Navigable directory tree
- NORMALIZERS / normalize_files: Typed record parsing per file type
- ArenaCatalog: Lookup of arena config and source records
- ContentService: Resolve -> classify -> normalize -> assemble
"""

from arenapack.core.catalog import ArenaCatalog, ArenaConfigRecord
from arenapack.core.files import PackageFile, build_package_files
from arenapack.core.kinds import KIND_MAP, FileType, classify_content, parse_yaml
from arenapack.core.models import ArenaConfigContent, BundleFile, ContentMetadata
from arenapack.core.normalizers import NORMALIZERS, NormalizedBundle, normalize_files
from arenapack.core.orchestrator import ContentService, build_content, find_entry_points
from arenapack.core.tree import (
    TreeNode,
    build_file_tree,
    count_directories,
    find_shadowed_paths,
)

__all__ = [
    # Classification
    "FileType",
    "KIND_MAP",
    "classify_content",
    "parse_yaml",
    "PackageFile",
    "build_package_files",
    # Tree
    "TreeNode",
    "build_file_tree",
    "count_directories",
    "find_shadowed_paths",
    # Normalization
    "NORMALIZERS",
    "NormalizedBundle",
    "normalize_files",
    # Aggregate
    "ArenaConfigContent",
    "BundleFile",
    "ContentMetadata",
    # Service
    "ArenaCatalog",
    "ArenaConfigRecord",
    "ContentService",
    "build_content",
    "find_entry_points",
]
