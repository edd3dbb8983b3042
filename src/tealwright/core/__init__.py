"""Build pipeline: normalization, versioning and configuration."""

from tealwright.core.build import BuildReport, render_scaffold, run_build
from tealwright.core.errors import (
    DraftNotFoundError,
    InvalidModuleNameError,
    ManifestError,
    SnapshotError,
    TealwrightError,
)
from tealwright.core.manifest import ProjectManifest, load_manifest, resolve_manifest
from tealwright.core.normalizer import NormalizeResult, extract_module_name, normalize
from tealwright.core.version_store import VersionSnapshot, VersionStore

__all__ = [
    "BuildReport",
    "DraftNotFoundError",
    "InvalidModuleNameError",
    "ManifestError",
    "NormalizeResult",
    "ProjectManifest",
    "SnapshotError",
    "TealwrightError",
    "VersionSnapshot",
    "VersionStore",
    "extract_module_name",
    "load_manifest",
    "normalize",
    "render_scaffold",
    "resolve_manifest",
    "run_build",
]
