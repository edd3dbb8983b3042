"""Shared CLI helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer

from tealwright.core.errors import ManifestError
from tealwright.core.manifest import MANIFEST_FILENAME, ProjectManifest, resolve_manifest

EXIT_DRAFT_MISSING = 1
EXIT_SNAPSHOT_FAILED = 2

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def manifest_option() -> str:
    return typer.Option(MANIFEST_FILENAME, "--manifest", "-m", help="Path to tealwright.toml")


def load_project(manifest: str) -> ProjectManifest:
    """Resolve the manifest path, exiting with code 1 on a broken file.

    A missing ``tealwright.toml`` is fine: defaults are rooted at its directory.
    """
    try:
        return resolve_manifest(Path(manifest))
    except ManifestError as e:
        typer.echo(f"Manifest error: {e.message}", err=True)
        raise typer.Exit(code=1)


def configure_logging(level: str | None) -> None:
    level_name = (level or os.getenv("TEALWRIGHT_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
