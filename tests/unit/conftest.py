"""Shared pytest fixtures for tealwright tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tealwright.core.manifest import ProjectManifest, load_manifest

SAMPLE_DRAFT = """import * as React from 'react'
const CustomModuleName = 'alpha'
// Choose a CustomModuleName for this script to automatically version
// Make sure to change the name to something else when starting a brand new custom module
// After confirming the desired name, save the script, then start iteration with tealwright serve
// Each time you save this script, a new version of the custom module will be created in your saved modules


// Build here
const Component = () => {
  return <div>Hi</div>
}


// For development, will be removed in build
export default Component
"""

SAMPLE_READY = """const Component = () => {
  return <div>Hi</div>
}

Component"""


@pytest.fixture
def sample_draft() -> str:
    return SAMPLE_DRAFT


@pytest.fixture
def project(tmp_path: Path) -> ProjectManifest:
    """A project with a tealwright.toml and no draft yet."""
    manifest_path = tmp_path / "tealwright.toml"
    manifest_path.write_text(
        """
[project]
name = "test-modules"

[watch]
poll_interval = 0.05
"""
    )
    return load_manifest(manifest_path)


@pytest.fixture
def write_draft(project: ProjectManifest):
    """Write text to the project's draft file."""

    def _write(text: str) -> Path:
        project.draft_path.parent.mkdir(parents=True, exist_ok=True)
        project.draft_path.write_text(text, encoding="utf-8")
        return project.draft_path

    return _write


@pytest.fixture
def sample_ready() -> str:
    return SAMPLE_READY
