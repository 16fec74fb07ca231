"""Tests for arenapack.core.orchestrator module."""

import logging

import httpx
import pytest

from arenapack.core import ArenaConfigContent, ArenaConfigRecord, ContentService, build_content
from arenapack.core.files import build_package_files
from arenapack.core.kinds import FileType
from arenapack.core.orchestrator import find_entry_points
from arenapack.exceptions import (
    ArenaConfigNotFoundError,
    BundleFileNotFoundError,
    ContentUnavailableError,
    NoContentError,
    NoSourceError,
    SourceNotFoundError,
)
from arenapack.fetcher import ContentResolver, InMemoryKeyValueStore, SourceDescriptor
from tests._helpers import artifact_client, make_tar_gz, write_files


class FakeCatalog:
    """Catalog backed by dictionaries."""

    def __init__(self, configs=None, sources=None):
        self.configs = {c.name: c for c in (configs or [])}
        self.sources = {s.name: s for s in (sources or [])}

    def get_config(self, workspace, namespace, name):
        if name not in self.configs:
            raise ArenaConfigNotFoundError(f"Arena config '{name}' not found")
        return self.configs[name]

    def get_source(self, workspace, namespace, name):
        return self.sources.get(name)


@pytest.fixture
def service_for(content_root):
    """Build a service over a catalog and a filesystem/key-value resolver."""

    def _build(catalog, stores=None, http_client=None):
        resolver = ContentResolver(
            http_client,
            InMemoryKeyValueStore(stores or {}),
            content_root=content_root,
        )
        return ContentService(catalog, resolver)

    return _build


class TestFindEntryPoints:
    """Tests for find_entry_points."""

    def test_only_arena_files(self):
        """Only arena-typed files are entry points."""
        files = build_package_files({
            "b.arena.yaml": "kind: Arena\n",
            "a.arena.yaml": "kind: Arena\n",
            "p.yaml": "kind: PromptConfig\n",
        })
        assert find_entry_points(files) == ["a.arena.yaml", "b.arena.yaml"]


class TestBuildContent:
    """Tests for build_content."""

    def test_support_bundle(self, support_bundle):
        """A full bundle is classified, wired and assembled."""
        content = build_content(support_bundle, "support-eval")

        assert content.metadata.name == "support-arena"
        assert content.metadata.namespace == "support"
        assert content.entry_point == "config.arena.yaml"
        assert len(content.files) == len(support_bundle)
        types = {f.path: f.type for f in content.files}
        assert types["personas/angry.yaml"] == FileType.PERSONA
        assert types["README.md"] == FileType.OTHER
        assert content.prompt_configs[0].variables[0].default == "Acme"
        assert content.providers[0].group == "default"
        assert content.mcp_servers["files"].command == "npx"
        assert content.judges["tone"].provider == "openai-judge"
        assert content.defaults.temperature == 0.2
        assert content.warnings == []

    def test_no_arena_file(self):
        """Without an arena file the fallback name is used."""
        content = build_content({"s.yaml": "kind: Scenario\n"}, "my-config")

        assert content.entry_point is None
        assert content.metadata.name == "my-config"
        assert content.metadata.namespace is None
        assert content.mcp_servers == {}
        assert content.defaults is None
        assert len(content.scenarios) == 1

    def test_arena_without_name(self):
        """An arena file with no metadata name falls back too."""
        content = build_content({"arena.yaml": "kind: Arena\nspec: {}\n"}, "fallback")
        assert content.metadata.name == "fallback"
        assert content.entry_point == "arena.yaml"

    def test_multiple_arena_files(self, caplog):
        """The first arena file in path order wins and a warning is kept."""
        files = {
            "b/arena.yaml": "kind: Arena\nmetadata:\n  name: second\nspec: {}\n",
            "a/arena.yaml": "kind: Arena\nmetadata:\n  name: first\nspec: {}\n",
        }

        with caplog.at_level(logging.WARNING, logger="arenapack.core.orchestrator"):
            content = build_content(files, "x")

        assert content.entry_point == "a/arena.yaml"
        assert content.metadata.name == "first"
        assert len(content.warnings) == 1
        assert "b/arena.yaml" in content.warnings[0]
        assert "Multiple arena files" in caplog.text

    def test_path_nested_under_file(self):
        """A path below a file path stays listed but is reported."""
        content = build_content({"a": "kind: Tool\n", "a/b.yaml": "kind: Tool\n"}, "x")

        assert [f.path for f in content.files] == ["a", "a/b.yaml"]
        assert [n.path for n in content.file_tree] == ["a"]
        assert len(content.warnings) == 1
        assert "a/b.yaml" in content.warnings[0]

    def test_entry_point_is_arena_typed(self, support_bundle):
        """The entry point is always one of the arena-typed files."""
        content = build_content(support_bundle, "x")
        arena_paths = [f.path for f in content.files if f.type == FileType.ARENA]
        assert content.entry_point in arena_paths

    def test_to_dict(self):
        """The content view serializes with camelCase keys."""
        content = build_content({"arena.yaml": "kind: Arena\nspec: {}\n"}, "x")
        data = content.to_dict()

        assert data["metadata"] == {"name": "x"}
        assert data["entryPoint"] == "arena.yaml"
        assert data["files"] == [{"path": "arena.yaml", "type": "arena", "size": 21}]
        assert data["fileTree"][0]["isDirectory"] is False
        assert data["promptConfigs"] == []
        assert "warnings" not in data

    def test_summary(self, support_bundle):
        """Summary counts files and records."""
        assert build_content(support_bundle, "x").summary() == {
            "fileCount": 7,
            "promptCount": 1,
            "providerCount": 1,
            "scenarioCount": 1,
            "toolCount": 1,
        }


class TestContentServiceGetContent:
    """Tests for ContentService.get_content."""

    def test_no_source(self, service_for):
        """A config without a source yields the "No source" view."""
        service = service_for(FakeCatalog([ArenaConfigRecord(name="c")]))

        content = service.get_content("ws", "ns", "c")

        assert content.metadata.name == "No source"
        assert content.is_empty
        assert content.file_tree == []
        assert content.prompt_configs == []
        assert content.entry_point is None

    def test_source_not_found(self, service_for):
        """A dangling source reference yields "Source not found"."""
        service = service_for(FakeCatalog([ArenaConfigRecord(name="c", source_ref="gone")]))

        content = service.get_content("ws", "ns", "c")

        assert content.metadata.name == "Source not found"
        assert content.is_empty

    def test_no_content_available(self, service_for):
        """A source with nothing synced yields "No content available"."""
        catalog = FakeCatalog(
            [ArenaConfigRecord(name="c", source_ref="s")],
            [SourceDescriptor(name="s", content_path="not/synced")],
        )

        content = service_for(catalog).get_content("ws", "ns", "c")

        assert content.metadata.name == "No content available"
        assert content.files == []

    def test_missing_config_propagates(self, service_for):
        """A missing arena config is an error, not an empty view."""
        with pytest.raises(ArenaConfigNotFoundError):
            service_for(FakeCatalog()).get_content("ws", "ns", "nope")

    def test_filesystem_bundle(self, service_for, content_root):
        """Hidden files are dropped and the tree mirrors the rest."""
        write_files(content_root / "ws" / "ns" / "arena/pack", {
            "a/arena.yaml": "kind: Arena\n",
            "a/p.prompt.yaml": "kind: PromptConfig\nmetadata:\n  name: greet\n",
            "a/.meta": "hidden\n",
        })
        catalog = FakeCatalog(
            [ArenaConfigRecord(name="c", source_ref="s")],
            [SourceDescriptor(name="s", content_path="arena/pack")],
        )

        content = service_for(catalog).get_content("ws", "ns", "c")

        assert [f.path for f in content.files] == ["a/arena.yaml", "a/p.prompt.yaml"]
        assert len(content.file_tree) == 1
        directory = content.file_tree[0]
        assert directory.name == "a"
        assert directory.is_directory
        assert [n.name for n in directory.children] == ["arena.yaml", "p.prompt.yaml"]
        assert content.entry_point == "a/arena.yaml"
        assert [p.id for p in content.prompt_configs] == ["greet"]
        # The arena file has no spec, so the config name is used
        assert content.metadata.name == "c"

    def test_key_value_bundle(self, service_for, support_bundle):
        """Content can come from the key-value store."""
        catalog = FakeCatalog(
            [ArenaConfigRecord(name="c", source_ref="s")],
            [SourceDescriptor(name="s", config_map="support")],
        )

        content = service_for(catalog, stores={"support": support_bundle}).get_content(
            "ws", "ns", "c"
        )

        assert content.metadata.name == "support-arena"
        assert content.summary()["fileCount"] == 7

    def test_artifact_bundle(self, service_for):
        """Content can come from a tar.gz artifact."""
        url = "http://artifacts.example/pack.tar.gz"
        archive = make_tar_gz({"./arena.yaml": "kind: Arena\nmetadata:\n  name: art\nspec: {}\n"})
        catalog = FakeCatalog(
            [ArenaConfigRecord(name="c", source_ref="s")],
            [SourceDescriptor(name="s", artifact_url=url)],
        )

        with artifact_client({url: httpx.Response(200, content=archive)}) as client:
            content = service_for(catalog, http_client=client).get_content("ws", "ns", "c")

        assert content.metadata.name == "art"
        assert content.entry_point == "arena.yaml"


class TestContentServiceGetFile:
    """Tests for ContentService.get_file."""

    @pytest.fixture
    def catalog(self):
        return FakeCatalog(
            [
                ArenaConfigRecord(name="c", source_ref="s"),
                ArenaConfigRecord(name="no-source"),
                ArenaConfigRecord(name="dangling", source_ref="gone"),
                ArenaConfigRecord(name="unsynced", source_ref="empty"),
            ],
            [
                SourceDescriptor(name="s", config_map="support"),
                SourceDescriptor(name="empty", config_map="nothing-here"),
            ],
        )

    def test_reads_file(self, service_for, catalog, support_bundle):
        """The file content is returned."""
        service = service_for(catalog, stores={"support": support_bundle})

        bundle_file = service.get_file("ws", "ns", "c", "prompts/greet.yaml")

        assert bundle_file.path == "prompts/greet.yaml"
        assert bundle_file.content == support_bundle["prompts/greet.yaml"]
        assert bundle_file.size == len(support_bundle["prompts/greet.yaml"])

    def test_leading_slash(self, service_for, catalog, support_bundle):
        """A leading slash is ignored."""
        service = service_for(catalog, stores={"support": support_bundle})
        assert service.get_file("ws", "ns", "c", "/README.md").path == "README.md"

    def test_missing_file(self, service_for, catalog, support_bundle):
        """A path outside the bundle raises BundleFileNotFoundError."""
        service = service_for(catalog, stores={"support": support_bundle})
        with pytest.raises(BundleFileNotFoundError):
            service.get_file("ws", "ns", "c", "nope.yaml")

    def test_unavailable_content(self, service_for, catalog):
        """Each empty reason maps to its own error."""
        service = service_for(catalog)

        with pytest.raises(NoSourceError):
            service.get_file("ws", "ns", "no-source", "a.yaml")
        with pytest.raises(SourceNotFoundError):
            service.get_file("ws", "ns", "dangling", "a.yaml")
        with pytest.raises(NoContentError):
            service.get_file("ws", "ns", "unsynced", "a.yaml")

    def test_errors_share_base(self):
        """The unavailable-content errors share a base class."""
        for error in (NoSourceError, SourceNotFoundError, NoContentError):
            assert issubclass(error, ContentUnavailableError)


class TestEmptyContent:
    """Tests for the tagged empty content view."""

    def test_to_dict(self):
        """The empty view carries only the reason and empty collections."""
        assert ArenaConfigContent.empty("No source").to_dict() == {
            "metadata": {"name": "No source"},
            "files": [],
            "fileTree": [],
            "promptConfigs": [],
            "providers": [],
            "scenarios": [],
            "tools": [],
            "mcpServers": {},
            "judges": {},
        }
