"""
Dev-server runtime: push channel, file watcher and hot-update orchestrator.
"""

from tealwright.runtime.notifications import (
    ClientNotification,
    ErrorNotification,
    FullReloadNotification,
    NotificationType,
)
from tealwright.runtime.orchestrator import (
    PLUGIN_NAME,
    BuildResult,
    HotUpdateOptions,
    HotUpdateOrchestrator,
    HotUpdateState,
    run_command,
)
from tealwright.runtime.push_channel import PushChannel
from tealwright.runtime.session import DevSession, WatchEvent
from tealwright.runtime.watcher import FileWatcher

__all__ = [
    "PLUGIN_NAME",
    "BuildResult",
    "ClientNotification",
    "DevSession",
    "ErrorNotification",
    "FileWatcher",
    "FullReloadNotification",
    "HotUpdateOptions",
    "HotUpdateOrchestrator",
    "HotUpdateState",
    "NotificationType",
    "PushChannel",
    "WatchEvent",
    "run_command",
]
