"""
Connection Models

Data classes representing WebSocket connections.
"""
from datetime import datetime, timezone
from typing import Dict, Any, Optional
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)

ROLE_HOST = "host"
ROLE_ATTENDEE = "attendee"


class MeetingConnection:
    """Represents a single WebSocket connection in a meeting room."""

    def __init__(
        self,
        websocket: WebSocket,
        connection_id: str,
        room_id: Optional[str] = None,
        role: Optional[str] = None,
    ):
        self.websocket = websocket
        self.connection_id = connection_id
        self.room_id = room_id
        self.role = role
        self.connected_at = datetime.now(timezone.utc)

    @property
    def is_host(self) -> bool:
        return self.role == ROLE_HOST

    async def send_json(self, data: Dict[str, Any]) -> bool:
        """Send JSON message to this connection."""
        try:
            await self.websocket.send_json(data)
            return True
        except Exception as e:
            logger.error(f"Error sending JSON to {self.connection_id}: {e}")
            return False
