"""
Hot-update orchestrator.

When the watched draft file changes, run the build command in a subprocess
and tell the browser what happened: an ``error`` notification if the build
failed, a ``full-reload`` if it succeeded. The event handler itself returns
straight away with an empty module list so the default incremental update
never runs for that file.

Builds are fire-and-forget by default: two quick saves start two concurrent
builds and whichever finishes last wins. With ``coalesce=True`` builds go
through a single slot instead; a save that lands mid-build supersedes the
running build (its result is dropped) and queues exactly one follow-up.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from tealwright.runtime.notifications import ErrorNotification, FullReloadNotification
from tealwright.runtime.session import WatchEvent

logger = logging.getLogger(__name__)

PLUGIN_NAME = "tealwright-hot-update"
LOG_PREFIX = f"[{PLUGIN_NAME}]"


@dataclass
class HotUpdateOptions:
    file_pattern: str  # suffix match against the changed path
    command: str  # shell command line
    cwd: Path | None = None
    coalesce: bool = False


@dataclass
class BuildResult:
    """Outcome of one build command invocation."""

    command: str
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    spawn_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.spawn_error is None and self.returncode == 0

    @property
    def failure_message(self) -> str:
        if self.spawn_error is not None:
            return f"could not start `{self.command}`: {self.spawn_error}"
        return f"`{self.command}` exited with code {self.returncode}"

    @property
    def trace(self) -> str | None:
        """Captured output to show alongside a failure, if any."""
        output = "\n".join(part.rstrip() for part in (self.stderr, self.stdout) if part.strip())
        return output or None


CommandRunner = Callable[[str, Path | None], Awaitable[BuildResult]]


async def run_command(command: str, cwd: Path | None = None) -> BuildResult:
    """Run a shell command to completion and capture its output."""
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        return BuildResult(command=command, returncode=None, spawn_error=str(e))

    stdout, stderr = await process.communicate()
    return BuildResult(
        command=command,
        returncode=process.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


class HotUpdateState(str, Enum):
    IDLE = "idle"
    BUILDING = "building"


class HotUpdateOrchestrator:
    """Dev-server plugin that rebuilds on draft changes and reloads the browser."""

    name = PLUGIN_NAME

    def __init__(self, options: HotUpdateOptions, runner: CommandRunner = run_command):
        self.options = options
        self._runner = runner
        self._tasks: set[asyncio.Task[None]] = set()

        # Single-slot queue, only used when coalescing
        self._current: asyncio.Task[None] | None = None
        self._pending: WatchEvent | None = None

    @property
    def state(self) -> HotUpdateState:
        return HotUpdateState.BUILDING if self._tasks else HotUpdateState.IDLE

    def matches(self, file: str) -> bool:
        return file.endswith(self.options.file_pattern)

    def handle_hot_update(self, event: WatchEvent) -> list[str] | None:
        """
        Handle one file-change event.

        Returns:
            None if the file is not ours, otherwise an empty list so the host
            skips its own incremental update for this file
        """
        if not self.matches(event.file):
            return None

        logger.info(f"{LOG_PREFIX} File changed: {event.file}")

        if self.options.coalesce and self._current is not None and not self._current.done():
            self._pending = event
            logger.info(f"{LOG_PREFIX} Build in progress, superseding it with a follow-up run")
            return []

        self._start(event)
        return []

    def _start(self, event: WatchEvent) -> None:
        logger.info(f"{LOG_PREFIX} Executing command: {self.options.command}")
        task = asyncio.get_running_loop().create_task(self._build(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._current = task

    async def _build(self, event: WatchEvent) -> None:
        try:
            result = await self._runner(self.options.command, self.options.cwd)
        except Exception as e:
            result = BuildResult(
                command=self.options.command, returncode=None, spawn_error=repr(e)
            )

        if self.options.coalesce and self._pending is not None:
            follow_up, self._pending = self._pending, None
            logger.info(f"{LOG_PREFIX} Build superseded, discarding its result")
            self._start(follow_up)
            return

        await self._report(event, result)

    async def _report(self, event: WatchEvent, result: BuildResult) -> None:
        channel = event.session.channel

        if not result.succeeded:
            logger.error(f"{LOG_PREFIX} Command failed: {result.failure_message}")
            await channel.send(
                ErrorNotification(
                    message=f"Build command failed: {result.failure_message}",
                    stack=result.trace,
                    plugin=self.name,
                )
            )
            return

        if result.stdout:
            logger.info(result.stdout.rstrip())
        if result.stderr:
            # Builds may warn without failing
            logger.error(result.stderr.rstrip())

        logger.info(f"{LOG_PREFIX} Command finished, sending full-reload.")
        await channel.send(FullReloadNotification(path="*"))

    async def wait_idle(self) -> None:
        """Wait until no build is running (follow-up runs included)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
