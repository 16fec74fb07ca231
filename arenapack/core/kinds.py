"""File types and kind-based classification.

Bundle files have no fixed layout; each YAML document declares what it is
through its top-level ``kind`` field.
"""

from enum import Enum
from typing import Any

import yaml


class FileType(Enum):
    """Semantic category of a bundle file."""

    ARENA = "arena"
    PROMPT = "prompt"
    PROVIDER = "provider"
    SCENARIO = "scenario"
    TOOL = "tool"
    PERSONA = "persona"
    OTHER = "other"


# Declared kind -> file type. Anything not listed is OTHER.
KIND_MAP: dict[str, FileType] = {
    "Arena": FileType.ARENA,
    "PromptConfig": FileType.PROMPT,
    "Provider": FileType.PROVIDER,
    "Scenario": FileType.SCENARIO,
    "Tool": FileType.TOOL,
    "Persona": FileType.PERSONA,
}


def parse_yaml(content: str) -> Any | None:
    """Parse a single YAML document, returning None if it is not valid YAML.

    Besides syntax errors, the safe loader raises plain ValueError/TypeError
    while constructing some scalars (``2024-02-30`` as a timestamp) and
    RecursionError on deeply nested input.
    """
    try:
        return yaml.safe_load(content)
    except (yaml.YAMLError, ValueError, TypeError, RecursionError):
        return None


def file_type_for_kind(kind: Any) -> FileType:
    """Map a declared kind to its file type."""
    if not isinstance(kind, str):
        return FileType.OTHER
    return KIND_MAP.get(kind, FileType.OTHER)


def classify_content(content: str) -> FileType:
    """Classify a file by the ``kind`` of its YAML document.

    Never raises: unparsable content, non-mapping documents and missing or
    unknown kinds are all OTHER.
    """
    parsed = parse_yaml(content)
    if not isinstance(parsed, dict):
        return FileType.OTHER
    return file_type_for_kind(parsed.get("kind"))
