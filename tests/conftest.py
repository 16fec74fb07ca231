"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from tests._helpers import (
    ARENA_YAML,
    PROMPT_YAML,
    PROVIDER_YAML,
    SCENARIO_YAML,
    TOOL_YAML,
)


@pytest.fixture
def support_bundle() -> dict[str, str]:
    """A complete bundle keyed by relative path."""
    return {
        "config.arena.yaml": ARENA_YAML,
        "prompts/greet.yaml": PROMPT_YAML,
        "providers/openai.yaml": PROVIDER_YAML,
        "scenarios/refund.yaml": SCENARIO_YAML,
        "tools/lookup_order.yaml": TOOL_YAML,
        "personas/angry.yaml": "kind: Persona\nmetadata:\n  name: angry-customer\n",
        "README.md": "# Support pack\n",
    }


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """An empty workspace content volume root."""
    root = tmp_path / "workspace-content"
    root.mkdir()
    return root
