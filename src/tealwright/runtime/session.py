"""
Dev-server session: the push channel plus the hot-update plugins.

The watcher hands every changed path to :meth:`DevSession.dispatch`, which
offers it to each plugin in turn. A plugin returning ``None`` passes; any
list (usually empty) means the plugin took the event and the default
update path is skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from tealwright.runtime.push_channel import PushChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchEvent:
    """A single changed file, plus the session it was observed in."""

    file: str
    session: DevSession


class HotUpdatePlugin(Protocol):
    name: str

    def handle_hot_update(self, event: WatchEvent) -> list[str] | None: ...


class DevSession:
    def __init__(self, channel: PushChannel | None = None):
        self.channel = channel or PushChannel()
        self.plugins: list[HotUpdatePlugin] = []

    def add_plugin(self, plugin: HotUpdatePlugin) -> None:
        self.plugins.append(plugin)

    def dispatch(self, file: str) -> bool:
        """
        Offer a changed file to the plugins.

        Must be called on the event loop thread.

        Returns:
            True if a plugin handled the event
        """
        event = WatchEvent(file=file, session=self)
        for plugin in self.plugins:
            if plugin.handle_hot_update(event) is not None:
                return True
        logger.debug(f"No plugin handled {file}, using default update")
        return False
