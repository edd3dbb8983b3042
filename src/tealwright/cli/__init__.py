"""
tealwright CLI.

The main application lives here; command implementations are in the
sibling modules:

- build.py: build, init
- serve.py: serve
- versions.py: versions, show, restore
"""

from __future__ import annotations

import sys

import typer

from tealwright._version import get_version
from tealwright.cli.build import build_command, init_command
from tealwright.cli.common import configure_logging
from tealwright.cli.serve import serve_command
from tealwright.cli.versions import restore_command, show_command, versions_command


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tealwright version {get_version()}")
        raise typer.Exit()


app = typer.Typer(
    help="""tealwright – iterate on Tealstreet custom modules locally

  • init: start a new draft from the scaffold
  • build: produce the paste-ready module (and save a version)
  • serve: preview with rebuild + reload on save
  • versions / show / restore: browse saved versions
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (default: $TEALWRIGHT_LOG_LEVEL or INFO)"
    ),
) -> None:
    """tealwright CLI main callback for global options."""
    configure_logging(log_level)


app.command(name="build")(build_command)
app.command(name="init")(init_command)
app.command(name="serve")(serve_command)
app.command(name="versions")(versions_command)
app.command(name="show")(show_command)
app.command(name="restore")(restore_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], standalone_mode=True)


__all__ = ["app", "main", "version_callback"]
