"""
Build entry point: draft module -> ready artifact (+ version snapshot).

Everything is resolved from the manifest passed in; the build never looks at
the process working directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tealwright.core.errors import DraftNotFoundError
from tealwright.core.manifest import ProjectManifest
from tealwright.core.normalizer import MODULE_NAME_IDENTIFIER, TRAILING_SYMBOL, normalize
from tealwright.core.version_store import VersionStore

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """What a single build produced."""

    ready_path: Path
    ready_text: str
    module_name: str | None = None
    version: int | None = None
    snapshot_dir: Path | None = None

    @property
    def versioned(self) -> bool:
        return self.version is not None


def read_draft(path: Path) -> str:
    """Read the draft; undecodable bytes become U+FFFD rather than failing the build."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
    except (FileNotFoundError, IsADirectoryError) as e:
        raise DraftNotFoundError(path) from e


def version_store_for(manifest: ProjectManifest) -> VersionStore:
    return VersionStore(
        manifest.saved_dir,
        draft_filename=manifest.draft_path.name,
        ready_filename=manifest.ready_path.name,
    )


def run_build(manifest: ProjectManifest) -> BuildReport:
    """
    Run one build.

    The ready artifact is written before the snapshot is committed, so a
    failing commit still leaves an up-to-date artifact on disk.

    Raises:
        DraftNotFoundError: If the draft file cannot be read
        SnapshotError: If a module name is declared but the snapshot fails
    """
    draft_text = read_draft(manifest.draft_path)
    result = normalize(draft_text)

    ready_path = manifest.ready_path
    ready_path.parent.mkdir(parents=True, exist_ok=True)
    with open(ready_path, "w", encoding="utf-8", newline="") as f:
        f.write(result.ready_text)
    logger.debug(f"Wrote ready artifact {ready_path}")

    report = BuildReport(
        ready_path=ready_path,
        ready_text=result.ready_text,
        module_name=result.module_name,
    )

    if result.module_name is None:
        logger.debug(f"No {MODULE_NAME_IDENTIFIER} declared, skipping versioning")
        return report

    store = version_store_for(manifest)
    report.version = store.commit(result.module_name, draft_text, result.ready_text)
    report.snapshot_dir = store.module_dir(result.module_name) / f"v{report.version}"
    return report


SCAFFOLD_TEMPLATE = """const {identifier} = '{module_name}'
// Choose a {identifier} for this script to automatically version
// Make sure to change the name to something else when starting a brand new custom module
// After confirming the desired name, save the script, then start iteration with tealwright serve
// Each time you save this script, a new version of the custom module will be created in your saved modules


// Build here
const {symbol} = () => {{
  return <div className='p-4 border bg-gray-900'>Build Here</div>
}}


// For development, will be removed in build
export default {symbol}
"""


def render_scaffold(module_name: str) -> str:
    """Return a fresh draft module declaring *module_name*."""
    return SCAFFOLD_TEMPLATE.format(
        identifier=MODULE_NAME_IDENTIFIER,
        module_name=module_name,
        symbol=TRAILING_SYMBOL,
    )
