"""CLI entry point for arenapack."""

from pathlib import Path
from typing import Annotated, Optional

import httpx
import typer

from arenapack import __version__
from arenapack.cli.common import (
    build_service,
    configure_logging,
    console,
    load_config_or_exit,
    print_json,
    render_content,
)
from arenapack.core import build_content
from arenapack.exceptions import ArenapackError
from arenapack.fetcher import read_directory

app = typer.Typer(
    name="arenapack",
    help="Inspect arena content packs: prompts, providers, scenarios and tools.",
    no_args_is_help=True,
    add_completion=False,
)

WorkspaceOption = Annotated[
    str, typer.Option("--workspace", "-w", help="Workspace that owns the arena config.")
]
NamespaceOption = Annotated[
    str, typer.Option("--namespace", "-n", help="Storage namespace of the workspace.")
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to arenapack.toml (searched upward by default)."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the result as JSON.")]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"arenapack {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
        ),
    ] = False,
) -> None:
    """Inspect arena content packs."""
    configure_logging(verbose)


@app.command("show")
def show(
    config_name: Annotated[str, typer.Argument(help="Arena config to load.", metavar="NAME")],
    workspace: WorkspaceOption = "default",
    namespace: NamespaceOption = "default",
    config_path: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Resolve an arena config's source and show its content.

    Examples:
      arenapack show support-eval
      arenapack show support-eval --workspace team-a --json
    """
    config = load_config_or_exit(config_path)

    with httpx.Client(
        follow_redirects=True, timeout=config.settings.artifact_timeout
    ) as client:
        service = build_service(config, client)
        try:
            content = service.get_content(workspace, namespace, config_name)
        except ArenapackError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    if as_json:
        print_json(content.to_dict())
    else:
        render_content(content)


@app.command("file")
def show_file(
    config_name: Annotated[str, typer.Argument(help="Arena config to load.", metavar="NAME")],
    path: Annotated[str, typer.Argument(help="Bundle-relative file path.", metavar="PATH")],
    workspace: WorkspaceOption = "default",
    namespace: NamespaceOption = "default",
    config_path: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Print one file of an arena config's bundle.

    Examples:
      arenapack file support-eval prompts/greet.yaml
    """
    config = load_config_or_exit(config_path)

    with httpx.Client(
        follow_redirects=True, timeout=config.settings.artifact_timeout
    ) as client:
        service = build_service(config, client)
        try:
            bundle_file = service.get_file(workspace, namespace, config_name, path)
        except ArenapackError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    if as_json:
        print_json(bundle_file.to_dict())
    else:
        typer.echo(bundle_file.content)


@app.command("inspect")
def inspect(
    directory: Annotated[
        Path,
        typer.Argument(
            help="Local bundle directory.",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    name: Annotated[
        Optional[str], typer.Option("--name", help="Name used if the arena file declares none.")
    ] = None,
    config_path: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Show the content of a bundle directory without a catalog.

    Examples:
      arenapack inspect ./my-pack
    """
    config = load_config_or_exit(config_path)

    files = read_directory(directory)
    if not files:
        console.print(f"[yellow]No files found in {directory}[/yellow]")
        raise typer.Exit(1)

    content = build_content(
        files,
        name or directory.resolve().name,
        template_max_length=config.settings.template_max_length,
    )
    if as_json:
        print_json(content.to_dict())
    else:
        render_content(content)
