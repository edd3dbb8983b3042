"""
Push channel from the dev server to connected preview pages.

A thin registry of browser WebSockets; every notification is broadcast as
JSON to all of them.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from tealwright.runtime.notifications import ClientNotification

if TYPE_CHECKING:
    from fastapi import WebSocket

logger = logging.getLogger(__name__)


class PushChannel:
    """Broadcasts client notifications to every connected browser."""

    def __init__(self, history_limit: int = 100):
        self._connections: dict[str, WebSocket] = {}
        self._history_limit = history_limit
        self.sent: list[dict[str, Any]] = []

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> str:
        """Accept a browser connection and return its id."""
        await websocket.accept()
        connection_id = str(uuid.uuid4())
        self._connections[connection_id] = websocket
        await websocket.send_json({"type": "connected"})
        logger.debug(f"Browser connected: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            logger.debug(f"Browser disconnected: {connection_id}")

    async def send(self, notification: ClientNotification) -> int:
        """
        Broadcast a notification.

        Returns:
            Number of browsers that received it
        """
        payload = notification.to_dict()
        self.sent.append(payload)
        if len(self.sent) > self._history_limit:
            del self.sent[: len(self.sent) - self._history_limit]

        delivered = 0
        dead: list[str] = []
        for connection_id, websocket in list(self._connections.items()):
            try:
                await websocket.send_json(payload)
                delivered += 1
            except Exception as e:
                logger.debug(f"Dropping browser {connection_id}: {e}")
                dead.append(connection_id)

        for connection_id in dead:
            self.disconnect(connection_id)
        return delivered
