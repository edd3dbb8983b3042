"""
CLI commands for saved module versions.

Commands:
- versions: List saved modules and their versions
- show: Print a saved version
- restore: Copy a saved draft back into the draft file
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from tealwright.cli.common import load_project, manifest_option
from tealwright.core.build import version_store_for
from tealwright.core.errors import SnapshotError


def versions_command(
    name: str | None = typer.Argument(None, help="Only list this module"),
    manifest: str = manifest_option(),
) -> None:
    """List saved modules and their versions."""
    project = load_project(manifest)
    store = version_store_for(project)

    try:
        names = [name] if name else store.list_modules()
        rows = [(module, store.list_versions(module)) for module in names]
    except SnapshotError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    rows = [(module, versions) for module, versions in rows if versions]
    if not rows:
        typer.echo(f"No saved versions in {store.base_dir}")
        return

    table = Table(title=f"Saved modules ({project.paths.saved})")
    table.add_column("Module", style="cyan")
    table.add_column("Versions", justify="right")
    table.add_column("Latest", style="green")
    for module, versions in rows:
        table.add_row(module, str(len(versions)), f"v{versions[-1]}")
    Console().print(table)


def show_command(
    name: str = typer.Argument(..., help="Module name"),
    version: int = typer.Argument(..., help="Version number"),
    draft: bool = typer.Option(False, "--draft", help="Show the draft instead of the ready text"),
    manifest: str = manifest_option(),
) -> None:
    """Print the ready (or draft) text of a saved version."""
    project = load_project(manifest)
    try:
        snapshot = version_store_for(project).read_snapshot(name, version)
    except SnapshotError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(snapshot.draft_text if draft else snapshot.ready_text)


def restore_command(
    name: str = typer.Argument(..., help="Module name"),
    version: int = typer.Argument(..., help="Version number"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite the current draft"),
    manifest: str = manifest_option(),
) -> None:
    """
    Continue from a saved version.

    Copies the saved draft over the current draft file. The snapshot itself
    is never modified; the next build creates a new version.
    """
    project = load_project(manifest)
    try:
        snapshot = version_store_for(project).read_snapshot(name, version)
    except SnapshotError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    draft_path = project.draft_path
    if draft_path.exists() and not force:
        typer.echo(f"Draft exists: {draft_path}", err=True)
        typer.echo("Use --force to overwrite it.", err=True)
        raise typer.Exit(code=1)

    draft_path.parent.mkdir(parents=True, exist_ok=True)
    with open(draft_path, "w", encoding="utf-8", newline="") as f:
        f.write(snapshot.draft_text)
    typer.echo(f"Restored {name} v{version} into {draft_path}")
