"""
tealwright - iterate on Tealstreet custom modules locally.

Builds a paste-ready module from a draft, keeps a versioned history of every
build, and reloads the preview in the browser when the draft changes.
"""

from __future__ import annotations

from tealwright._version import get_version
from tealwright.core.errors import (
    DraftNotFoundError,
    ManifestError,
    SnapshotError,
    TealwrightError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "TealwrightError",
    "ManifestError",
    "DraftNotFoundError",
    "SnapshotError",
]
