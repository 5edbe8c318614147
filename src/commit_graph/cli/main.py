"""Command line interface for inspecting commit graph snapshots."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from commit_graph.config import EngineSettings, load_settings
from commit_graph.core.git_import import load_remote_refs, load_snapshot
from commit_graph.core.layout import compute_layout
from commit_graph.core.references import RefKind, describe_refs, list_references
from commit_graph.core.remote import project_remote_view
from commit_graph.errors import InvalidStoreError
from commit_graph.models.layout import GraphLayout
from commit_graph.models.store import GraphStore

console = Console()


def load_store_or_exit(snapshot: str) -> GraphStore:
    """Read a JSON snapshot or exit with an error message."""
    try:
        return GraphStore.model_validate_json(Path(snapshot).read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Error: invalid snapshot {snapshot}[/red]")
        console.print(str(e), markup=False)
        raise click.Abort() from e


def load_refs_or_exit(refs_file: str) -> Dict[str, str]:
    try:
        data = json.loads(Path(refs_file).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {refs_file} is not valid JSON: {e}[/red]")
        raise click.Abort() from e
    if not isinstance(data, dict):
        console.print(f"[red]Error: {refs_file} must contain a JSON object[/red]")
        raise click.Abort()
    return {str(name): str(target) for name, target in data.items()}


def print_layout(layout: GraphLayout, title: str) -> None:
    nodes = Table(title=title)
    nodes.add_column("Commit", style="cyan")
    nodes.add_column("Lane", justify="right")
    nodes.add_column("Column", justify="right")
    nodes.add_column("Lineage")
    nodes.add_column("Message")
    for node in layout.nodes:
        marker = "[bold green]HEAD → [/bold green]" if node.is_head else ""
        nodes.add_row(
            f"{marker}{node.id[:7]}",
            str(node.row),
            str(node.column),
            node.branch or "-",
            escape(node.message or ""),
        )
    console.print(nodes)

    edges = Table(title="Edges")
    edges.add_column("From", style="cyan")
    edges.add_column("To", style="cyan")
    edges.add_column("Kind")
    for edge in layout.edges:
        edges.add_row(edge.from_id[:7], edge.to_id[:7], "merge" if edge.is_merge else "parent")
    console.print(edges)

    for diagnostic in layout.diagnostics:
        console.print(f"[yellow]⚠ {escape(diagnostic.message)}[/yellow]")


@click.group()
@click.version_option(package_name="commit-graph")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON engine settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine diagnostics")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Commit graph engine - layout and remote views for commit graphs."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True))],
        )
    try:
        ctx.obj = load_settings(config_path)
    except (ValidationError, json.JSONDecodeError) as e:
        console.print(f"[red]Error: invalid config: {escape(str(e))}[/red]")
        raise click.Abort() from e
    except OSError as e:
        console.print(f"[red]Error: cannot read config: {escape(str(e))}[/red]")
        raise click.Abort() from e


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the renderer payload as JSON")
@click.pass_obj
def layout(settings: EngineSettings, snapshot: str, as_json: bool):
    """Lay out the commits of a snapshot."""
    store = load_store_or_exit(snapshot)
    result = compute_layout(store, settings)
    if as_json:
        click.echo(json.dumps(result.to_render_dict(), indent=2))
        return
    print_layout(result, f"Commit graph ({len(result.nodes)} commits)")


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
def refs(snapshot: str):
    """Show branches, tags and HEAD of a snapshot."""
    store = load_store_or_exit(snapshot)

    for kind in RefKind:
        entries = list_references(store, kind)
        if not entries:
            console.print(f"[dim]No {kind.value} found.[/dim]")
            continue
        table = Table(title=kind.value.title())
        table.add_column("Name", style="bold")
        table.add_column("Hash", style="cyan")
        table.add_column("Message")
        table.add_column("Date", justify="right")
        for entry in entries:
            commit = entry.commit
            table.add_row(
                entry.name,
                entry.short_id,
                escape(commit.message or "") if commit else "<unknown commit>",
                str(commit.timestamp) if commit and commit.timestamp is not None else "-",
            )
        console.print(table)

    for section, name, target in describe_refs(store):
        if section == "HEAD":
            console.print(f"[bold]HEAD:[/bold] {name} {target[:7]}".rstrip())


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--refs",
    "refs_file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help='JSON object of remote-tracking refs, e.g. {"origin/main": "c4"}',
)
@click.option("--remote", help="Remote name (defaults to the configured remote)")
@click.option("--json", "as_json", is_flag=True, help="Print the projected store as JSON")
@click.pass_obj
def remote(
    settings: EngineSettings,
    snapshot: str,
    refs_file: str,
    remote: Optional[str],
    as_json: bool,
):
    """Show what a remote holds, given its tracking refs."""
    store = load_store_or_exit(snapshot)
    projection = project_remote_view(
        store, load_refs_or_exit(refs_file), remote=remote, settings=settings
    )
    if as_json:
        click.echo(projection.store.model_dump_json(by_alias=True, indent=2))
        return

    name = remote or settings.remote_name
    print_layout(compute_layout(projection.store, settings), f"Remote '{name}'")
    for diagnostic in projection.diagnostics:
        console.print(f"[yellow]⚠ {escape(diagnostic.message)}[/yellow]")


@main.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx: click.Context, snapshot: str):
    """Validate snapshot integrity. Exits with status 1 on problems."""
    store = load_store_or_exit(snapshot)
    diagnostics = store.check_integrity()
    if not diagnostics:
        console.print(f"[green]✅ {len(store.commits)} commits, no problems found[/green]")
        return
    for diagnostic in diagnostics:
        console.print(f"[red]✗ {escape(diagnostic.message)}[/red]")
    ctx.exit(1)


@main.command("import")
@click.argument("repo_path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write snapshot here")
@click.option(
    "--remote-refs",
    type=click.Path(dir_okay=False),
    help="Also write the remote-tracking refs here",
)
@click.pass_obj
def import_repo(
    settings: EngineSettings,
    repo_path: str,
    output: Optional[str],
    remote_refs: Optional[str],
):
    """Snapshot a git repository as JSON."""
    try:
        store = load_snapshot(repo_path, settings)
        tracking = load_remote_refs(repo_path, settings.remote_name) if remote_refs else {}
    except InvalidStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    payload = store.model_dump_json(by_alias=True, indent=2)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
        console.print(f"[green]Wrote {len(store.commits)} commits to {output}[/green]")
    else:
        click.echo(payload)

    if remote_refs:
        Path(remote_refs).write_text(json.dumps(tracking, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
