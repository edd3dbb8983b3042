"""
Client notifications pushed to the preview page.

Wire shapes::

    {"type": "error", "err": {"message": str, "stack"?: str, "plugin": str}}
    {"type": "full-reload", "path": "*"}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    ERROR = "error"
    FULL_RELOAD = "full-reload"


@dataclass
class ErrorNotification:
    """A failed build, shown as an overlay in the browser."""

    message: str
    plugin: str
    stack: str | None = None

    @property
    def type(self) -> NotificationType:
        return NotificationType.ERROR

    def to_dict(self) -> dict[str, Any]:
        err: dict[str, Any] = {"message": self.message, "plugin": self.plugin}
        if self.stack is not None:
            err["stack"] = self.stack
        return {"type": self.type.value, "err": err}


@dataclass
class FullReloadNotification:
    """Discard all client state and reload."""

    path: str = "*"

    @property
    def type(self) -> NotificationType:
        return NotificationType.FULL_RELOAD

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "path": self.path}


ClientNotification = ErrorNotification | FullReloadNotification
