"""
Append-only version history for built modules.

Each build of a named module is stored as an immutable snapshot::

    <base_dir>/<module_name>/v<N>/<draft file>
    <base_dir>/<module_name>/v<N>/<ready file>

Version numbers start at 1 and only ever grow. A new number is reserved by
creating its directory with exclusive-create semantics, so two concurrent
commits for the same module cannot end up sharing a directory; the loser of
the race retries with the next number.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from tealwright.core.errors import InvalidModuleNameError, SnapshotError

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_FILENAME = "component-iterate.tsx"
DEFAULT_READY_FILENAME = "component-ready.tsx"

_VERSION_DIR = re.compile(r"^v([1-9][0-9]*)$")
_MAX_RESERVE_ATTEMPTS = 1000


@dataclass(frozen=True)
class VersionSnapshot:
    """One committed (draft, ready) pair."""

    module_name: str
    version: int
    path: Path
    draft_text: str
    ready_text: str


def validate_module_name(module_name: str) -> str:
    """Reject names that are not a single, plain path segment."""
    if (
        not module_name.strip()
        or module_name in (".", "..")
        or "/" in module_name
        or "\\" in module_name
        or "\x00" in module_name
    ):
        raise InvalidModuleNameError(module_name)
    return module_name


class VersionStore:
    """
    Filesystem-backed snapshot store keyed by module name.

    The base directory is always passed in explicitly; nothing here reads the
    process working directory.
    """

    def __init__(
        self,
        base_dir: Path,
        draft_filename: str = DEFAULT_DRAFT_FILENAME,
        ready_filename: str = DEFAULT_READY_FILENAME,
    ):
        self.base_dir = base_dir
        self.draft_filename = draft_filename
        self.ready_filename = ready_filename

    def module_dir(self, module_name: str) -> Path:
        return self.base_dir / validate_module_name(module_name)

    def list_modules(self) -> list[str]:
        """Return module names that have a snapshot directory, sorted."""
        if not self.base_dir.is_dir():
            return []
        return sorted(p.name for p in self.base_dir.iterdir() if p.is_dir())

    def list_versions(self, module_name: str) -> list[int]:
        """Return the committed version numbers for a module, ascending."""
        module_dir = self.module_dir(module_name)
        if not module_dir.is_dir():
            return []
        versions = []
        for entry in module_dir.iterdir():
            match = _VERSION_DIR.match(entry.name)
            if match and entry.is_dir():
                versions.append(int(match.group(1)))
        return sorted(versions)

    def latest_version(self, module_name: str) -> int | None:
        versions = self.list_versions(module_name)
        return versions[-1] if versions else None

    def commit(self, module_name: str, draft_text: str, ready_text: str) -> int:
        """
        Store a new snapshot and return its version number.

        Raises:
            InvalidModuleNameError: If the name is not a usable directory name
            SnapshotError: If the directory or either file cannot be written
        """
        module_dir = self.module_dir(module_name)
        try:
            module_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SnapshotError(f"Cannot create {module_dir}: {e}") from e

        version, version_dir = self._reserve(module_name, module_dir)

        try:
            self._write_once(version_dir / self.draft_filename, draft_text)
            self._write_once(version_dir / self.ready_filename, ready_text)
        except OSError as e:
            # The number stays consumed; it is never handed out again
            raise SnapshotError(f"Cannot write snapshot {version_dir}: {e}") from e

        logger.debug(f"Committed {module_name} v{version} to {version_dir}")
        return version

    def _reserve(self, module_name: str, module_dir: Path) -> tuple[int, Path]:
        candidate = (self.latest_version(module_name) or 0) + 1
        for _ in range(_MAX_RESERVE_ATTEMPTS):
            version_dir = module_dir / f"v{candidate}"
            try:
                version_dir.mkdir(exist_ok=False)
            except FileExistsError:
                logger.debug(f"{version_dir} already taken, trying v{candidate + 1}")
                candidate += 1
                continue
            except OSError as e:
                raise SnapshotError(f"Cannot create {version_dir}: {e}") from e
            return candidate, version_dir
        raise SnapshotError(f"Could not reserve a version directory under {module_dir}")

    @staticmethod
    def _write_once(path: Path, text: str) -> None:
        with open(path, "x", encoding="utf-8", newline="") as f:
            f.write(text)

    @staticmethod
    def _read(path: Path) -> str:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def read_snapshot(self, module_name: str, version: int) -> VersionSnapshot:
        """
        Load a committed snapshot.

        Raises:
            SnapshotError: If the version or either of its files is missing
        """
        version_dir = self.module_dir(module_name) / f"v{version}"
        if not version_dir.is_dir():
            raise SnapshotError(f"No snapshot {module_name} v{version} in {self.base_dir}")
        try:
            draft_text = self._read(version_dir / self.draft_filename)
            ready_text = self._read(version_dir / self.ready_filename)
        except OSError as e:
            raise SnapshotError(f"Incomplete snapshot {version_dir}: {e}") from e
        return VersionSnapshot(
            module_name=module_name,
            version=version,
            path=version_dir,
            draft_text=draft_text,
            ready_text=ready_text,
        )
