"""
Polling file watcher for the dev server.

Uses mtime-based change detection on a background thread, so there is
nothing platform specific to install.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)


class FileWatcher:
    """Watches files for changes using polling."""

    def __init__(
        self,
        paths: list[Path],
        on_change: Callable[[Path], None],
        patterns: list[str] | None = None,
        poll_interval: float = 0.5,
        exclude: list[Path] | None = None,
    ):
        """
        Initialize the file watcher.

        Args:
            paths: Directories or files to watch
            on_change: Callback when a file changes (called on the watcher thread)
            patterns: Glob patterns to match inside watched directories
            poll_interval: How often to check for changes (seconds)
            exclude: Directories whose contents are never reported
        """
        self.paths = paths
        self.on_change = on_change
        self.patterns = patterns or ["*.tsx"]
        self.poll_interval = poll_interval
        self.exclude = [p.resolve() for p in exclude or []]

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._file_mtimes: dict[Path, float] = {}

    def start(self) -> None:
        """Start watching for file changes."""
        self._file_mtimes = self._scan_files()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._watch_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop watching for file changes."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None

    def _excluded(self, file_path: Path) -> bool:
        resolved = file_path.resolve()
        return any(resolved.is_relative_to(excluded) for excluded in self.exclude)

    def _scan_files(self) -> dict[Path, float]:
        """Scan all watched paths and return file mtimes."""
        mtimes: dict[Path, float] = {}

        for watch_path in self.paths:
            if not watch_path.exists():
                continue

            if watch_path.is_file():
                try:
                    mtimes[watch_path] = watch_path.stat().st_mtime
                except OSError:
                    pass
                continue

            for pattern in self.patterns:
                for file_path in watch_path.rglob(pattern):
                    if self._excluded(file_path):
                        continue
                    try:
                        mtimes[file_path] = file_path.stat().st_mtime
                    except OSError:
                        # Deleted between listing and stat
                        pass

        return mtimes

    def poll(self) -> list[Path]:
        """Run one scan and return the paths that are new or modified."""
        current_mtimes = self._scan_files()
        changed_files = [
            file_path
            for file_path, mtime in current_mtimes.items()
            if file_path not in self._file_mtimes or mtime > self._file_mtimes[file_path]
        ]
        self._file_mtimes = current_mtimes
        return changed_files

    def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                for file_path in self.poll():
                    try:
                        self.on_change(file_path)
                    except Exception:
                        logger.exception(f"Error in change callback for {file_path}")
            except Exception:
                logger.exception("File watcher error")

            self._stop_event.wait(self.poll_interval)
