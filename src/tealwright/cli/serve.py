"""
Serve command.

Start the dev server with hot update on draft changes.
"""

from __future__ import annotations

import typer

from tealwright.cli.common import load_project, manifest_option


def serve_command(
    manifest: str = manifest_option(),
    host: str | None = typer.Option(None, "--host", help="Host to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind to"),
) -> None:
    """
    Run the preview dev server.

    Saving the draft runs the build command; the browser gets a full reload
    on success or an error overlay on failure.

    Examples:
        tealwright serve
        tealwright serve --port 4000
    """
    from tealwright.runtime.dev_server import run_dev_server

    project = load_project(manifest)
    if not project.draft_path.exists():
        typer.echo(f"Warning: draft not found at {project.draft_path}", err=True)
        typer.echo("Run 'tealwright init' to create one.", err=True)

    typer.echo(f"[tealwright] Watching: {project.watch.file_pattern}")
    typer.echo(f"[tealwright] Build command: {project.build_command}")
    typer.echo(f"[tealwright] URL: http://{host or project.server.host}:{port or project.server.port}")
    typer.echo("[tealwright] Press Ctrl+C to stop")
    run_dev_server(project, host=host, port=port)
