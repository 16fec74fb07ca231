"""Shared helpers for arenapack CLI commands."""

import json
import logging
from datetime import date, datetime
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from arenapack.config import ArenapackConfig, load_config
from arenapack.core import ArenaConfigContent, ContentService, TreeNode, count_directories
from arenapack.exceptions import ArenapackError
from arenapack.fetcher import ContentResolver, InMemoryKeyValueStore

console = Console()

TYPE_STYLES = {
    "arena": "bold magenta",
    "prompt": "cyan",
    "provider": "green",
    "scenario": "yellow",
    "tool": "blue",
    "persona": "bright_cyan",
    "other": "dim",
}


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config_or_exit(config_path: Path | None) -> ArenapackConfig:
    """Load arenapack.toml, exiting with an error message on failure."""
    try:
        return load_config(config_path)
    except ArenapackError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def build_service(config: ArenapackConfig, http_client: httpx.Client) -> ContentService:
    """Wire a ContentService from config and an open HTTP client."""
    settings = config.settings
    resolver = ContentResolver(
        http_client=http_client,
        key_value_store=InMemoryKeyValueStore(config.stores),
        content_root=settings.content_root,
        loopback_url=settings.loopback_url,
        service_url=settings.service_url,
    )
    return ContentService(
        config, resolver, template_max_length=settings.template_max_length
    )


def _json_default(value: object) -> object:
    # Non-JSON scalars the YAML safe loader can produce
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def print_json(data: object) -> None:
    """Print a JSON document as plain text.

    YAML dates and timestamps are written as ISO strings; other values
    JSON can't represent are written as their string form.
    """
    typer.echo(json.dumps(data, indent=2, default=_json_default))


def _add_tree_nodes(branch: Tree, nodes: list[TreeNode]) -> None:
    for node in nodes:
        if node.is_directory:
            child = branch.add(f"[bold]{escape(node.name)}/[/bold]")
            _add_tree_nodes(child, node.children or [])
        else:
            file_type = node.type.value if node.type else "other"
            style = TYPE_STYLES.get(file_type, "")
            branch.add(f"{escape(node.name)} [{style}]({file_type})[/{style}]")


def render_content(content: ArenaConfigContent) -> None:
    """Print a human-readable view of an arena config's content."""
    console.print(f"[bold cyan]Arena: {escape(content.metadata.name)}[/bold cyan]")
    if content.metadata.namespace:
        console.print(f"[dim]Namespace: {escape(content.metadata.namespace)}[/dim]")

    if content.is_empty:
        console.print("[yellow]No files in bundle[/yellow]")
        return

    if content.entry_point:
        console.print(f"Entry point: {escape(content.entry_point)}")
    else:
        console.print("[yellow]No arena file found[/yellow]")

    for warning in content.warnings:
        console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")

    console.print()
    tree = Tree(f"[bold]{escape(content.metadata.name)}[/bold]")
    _add_tree_nodes(tree, content.file_tree)
    console.print(tree)

    console.print()
    table = Table(title="Records")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Details")
    table.add_column("File", style="dim")

    for prompt in content.prompt_configs:
        task_type = str(prompt.task_type or "")
        table.add_row("prompt", escape(prompt.id), escape(task_type), escape(prompt.file))
    for provider in content.providers:
        details = f"{provider.type}/{provider.model}"
        if provider.group:
            details += f" ({provider.group})"
        table.add_row("provider", escape(provider.id), escape(details), escape(provider.file))
    for scenario in content.scenarios:
        turns = scenario.turn_count or 0
        table.add_row("scenario", escape(scenario.id), f"{turns} turns", escape(scenario.file))
    for tool in content.tools:
        details = str(tool.mode or "")
        if tool.has_mock_data:
            details = f"{details} (mock)".strip()
        table.add_row("tool", escape(tool.name), escape(details), escape(tool.file))
    console.print(table)

    if content.mcp_servers:
        console.print("\n[bold]MCP servers:[/bold]")
        for name, server in content.mcp_servers.items():
            args = " ".join(server.args or [])
            console.print(f"  - {name}: {server.command or ''} {args}".rstrip())
    if content.judges:
        console.print("\n[bold]Judges:[/bold]")
        for name, judge in content.judges.items():
            console.print(f"  - {name}: {judge.provider or ''}")

    summary = content.summary()
    console.print(
        f"\n[dim]Files: {summary['fileCount']}, "
        f"directories: {count_directories(content.file_tree)}, "
        f"prompts: {summary['promptCount']}, providers: {summary['providerCount']}, "
        f"scenarios: {summary['scenarioCount']}, tools: {summary['toolCount']}[/dim]"
    )
