"""
Build commands.

Commands:
- build: Regenerate the ready artifact and snapshot the draft
- init: Write a scaffold draft and a default tealwright.toml
"""

from __future__ import annotations

import typer

from tealwright.cli.common import (
    EXIT_DRAFT_MISSING,
    EXIT_SNAPSHOT_FAILED,
    load_project,
    manifest_option,
)
from tealwright.core.build import render_scaffold, run_build
from tealwright.core.errors import DraftNotFoundError, SnapshotError
from tealwright.core.manifest import render_default_manifest
from tealwright.core.normalizer import MODULE_NAME_IDENTIFIER


def build_command(manifest: str = manifest_option()) -> None:
    """
    Convert the draft module into a paste-ready Tealstreet module.

    If the draft declares a CustomModuleName, the draft and ready text are
    also saved as a new numbered version.
    """
    project = load_project(manifest)

    try:
        report = run_build(project)
    except DraftNotFoundError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=EXIT_DRAFT_MISSING)
    except SnapshotError as e:
        # The ready artifact was already written before the commit failed
        typer.echo("✅ Tealstreet-ready component re-generated")
        typer.echo(f"❌ Version snapshot failed: {e.message}", err=True)
        raise typer.Exit(code=EXIT_SNAPSHOT_FAILED)

    typer.echo("✅ Tealstreet-ready component re-generated")
    if report.versioned:
        typer.echo(
            f"✅ Components saved to {project.paths.saved}/{report.module_name}/v{report.version}/"
        )
    else:
        typer.echo(
            f"ℹ️  Add 'const {MODULE_NAME_IDENTIFIER} = \"your-name\"' "
            f"to auto-save to {project.paths.saved}/ folder"
        )


def init_command(
    name: str = typer.Argument("newModule", help="CustomModuleName for the new draft"),
    manifest: str = manifest_option(),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing draft"),
) -> None:
    """
    Start a new custom module from the scaffold draft.
    """
    project = load_project(manifest)

    if not project.manifest_path.exists():
        project.manifest_path.write_text(render_default_manifest(project.root.name))
        typer.echo(f"Created: {project.manifest_path}")

    draft_path = project.draft_path
    if draft_path.exists() and not force:
        typer.echo(f"Draft exists: {draft_path}", err=True)
        typer.echo("Use --force to overwrite it.", err=True)
        raise typer.Exit(code=1)

    draft_path.parent.mkdir(parents=True, exist_ok=True)
    draft_path.write_text(render_scaffold(name), encoding="utf-8")
    typer.echo(f"Created draft: {draft_path}")
    typer.echo("Run 'tealwright serve' and start editing.")
