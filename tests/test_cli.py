"""Tests for the arenapack CLI."""

import json

import pytest
from typer.testing import CliRunner

from arenapack import __version__
from arenapack.cli.main import app
from tests._helpers import write_files

runner = CliRunner()


@pytest.fixture
def project(tmp_path, content_root, support_bundle):
    """A directory holding arenapack.toml and a synced bundle."""
    write_files(content_root / "default" / "default" / "arena/support", support_bundle)
    config = tmp_path / "arenapack.toml"
    config.write_text(
        f"""\
[settings]
content_root = "{content_root.as_posix()}"

[config.support-eval]
source = "support-pack"

[config.draft]

[config.dangling]
source = "missing"

[source.support-pack]
content_path = "arena/support"
"""
    )
    return config


class TestVersion:
    """Tests for the --version option."""

    def test_version(self):
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestShowCommand:
    """Tests for the show command."""

    def test_json(self, project):
        """--json prints the content view."""
        result = runner.invoke(app, ["show", "support-eval", "--config", str(project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"] == {"name": "support-arena", "namespace": "support"}
        assert data["entryPoint"] == "config.arena.yaml"
        assert [p["id"] for p in data["promptConfigs"]] == ["greet"]
        assert data["providers"][0]["group"] == "default"
        assert data["tools"][0]["hasMockData"] is True

    def test_human_readable(self, project):
        """Without --json a summary is rendered."""
        result = runner.invoke(app, ["show", "support-eval", "--config", str(project)])

        assert result.exit_code == 0
        assert "Arena: support-arena" in result.output
        assert "Entry point: config.arena.yaml" in result.output
        assert "greet" in result.output

    def test_no_source(self, project):
        """A config without a source shows the reason as its name."""
        result = runner.invoke(app, ["show", "draft", "--config", str(project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["name"] == "No source"
        assert data["files"] == []
        assert data["fileTree"] == []

    def test_source_not_found(self, project):
        """A dangling source shows "Source not found"."""
        result = runner.invoke(app, ["show", "dangling", "--config", str(project)])

        assert result.exit_code == 0
        assert "Source not found" in result.output
        assert "No files in bundle" in result.output

    def test_unknown_config(self, project):
        """An unknown arena config is an error."""
        result = runner.invoke(app, ["show", "nope", "--config", str(project)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "nope" in result.output

    def test_missing_config_file(self, tmp_path):
        """An explicit config path must exist."""
        result = runner.invoke(
            app, ["show", "x", "--config", str(tmp_path / "missing.toml")]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestFileCommand:
    """Tests for the file command."""

    def test_prints_content(self, project, support_bundle):
        """The file content is printed as-is."""
        result = runner.invoke(
            app, ["file", "support-eval", "scenarios/refund.yaml", "--config", str(project)]
        )

        assert result.exit_code == 0
        assert result.stdout.rstrip("\n") == support_bundle["scenarios/refund.yaml"].rstrip("\n")

    def test_json(self, project):
        """--json prints path, content and size."""
        result = runner.invoke(
            app, ["file", "support-eval", "README.md", "--config", str(project), "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "path": "README.md",
            "content": "# Support pack\n",
            "size": 15,
        }

    def test_missing_file(self, project):
        """A path outside the bundle is an error."""
        result = runner.invoke(
            app, ["file", "support-eval", "nope.yaml", "--config", str(project)]
        )

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_no_source(self, project):
        """A config without a source is an error for file reads."""
        result = runner.invoke(app, ["file", "draft", "a.yaml", "--config", str(project)])

        assert result.exit_code == 1
        assert "No source configured" in result.output


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_json(self, tmp_path, support_bundle, project):
        """A local directory is classified without a catalog."""
        bundle = write_files(tmp_path / "pack", support_bundle)

        result = runner.invoke(app, ["inspect", str(bundle), "--config", str(project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["name"] == "support-arena"
        assert len(data["files"]) == 7

    def test_name_fallback(self, tmp_path, project):
        """Without an arena file the directory name is used."""
        bundle = write_files(tmp_path / "my-pack", {"s.yaml": "kind: Scenario\n"})

        result = runner.invoke(app, ["inspect", str(bundle), "--config", str(project), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["metadata"]["name"] == "my-pack"

    def test_name_option(self, tmp_path, project):
        """--name overrides the directory name."""
        bundle = write_files(tmp_path / "my-pack", {"s.yaml": "kind: Scenario\n"})

        result = runner.invoke(
            app,
            ["inspect", str(bundle), "--name", "custom", "--config", str(project), "--json"],
        )

        assert json.loads(result.stdout)["metadata"]["name"] == "custom"

    def test_json_with_dates(self, tmp_path, project):
        """YAML dates in records are printed as ISO strings."""
        bundle = write_files(tmp_path / "dated", {
            "p.yaml": (
                "kind: PromptConfig\n"
                "metadata:\n  name: dated\n"
                "spec:\n  variables:\n    - name: since\n      default: 2024-01-01\n"
            ),
            "t.yaml": (
                "kind: Tool\n"
                "metadata:\n  name: clock\n"
                "spec:\n  input_schema:\n    example: 2024-01-01 10:30:00\n"
            ),
        })

        result = runner.invoke(app, ["inspect", str(bundle), "--config", str(project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["promptConfigs"][0]["variables"][0]["default"] == "2024-01-01"
        assert data["tools"][0]["inputSchema"]["example"] == "2024-01-01T10:30:00"

    def test_empty_directory(self, tmp_path, project):
        """An empty directory is an error."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(app, ["inspect", str(empty), "--config", str(project)])

        assert result.exit_code == 1
        assert "No files found" in result.output
