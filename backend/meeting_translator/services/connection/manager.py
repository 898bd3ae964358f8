"""
Connection Manager

Core WebSocket connection management:
- Connection/disconnection handling
- Room membership tracking
- Message broadcasting
"""
import asyncio
from typing import Dict, List, Optional, Any
import logging

from fastapi import WebSocket

from .models import MeetingConnection

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages all WebSocket connections and their room membership.

    A connection exists from socket accept to disconnect; it belongs to
    at most one room at a time.
    """

    def __init__(self):
        # connection_id -> MeetingConnection
        self._connections: Dict[str, MeetingConnection] = {}
        # room_id -> {connection_id: MeetingConnection}
        self._rooms: Dict[str, Dict[str, MeetingConnection]] = {}
        self._lock = asyncio.Lock()

    # === Core Connection Methods ===

    async def connect(self, websocket: WebSocket, connection_id: str) -> MeetingConnection:
        """Register a new WebSocket connection (not yet in a room)."""
        async with self._lock:
            conn = MeetingConnection(websocket=websocket, connection_id=connection_id)
            self._connections[connection_id] = conn

        logger.info(f"Connection {connection_id} registered")
        return conn

    async def disconnect(self, connection_id: str) -> Optional[MeetingConnection]:
        """Remove a connection and its room membership."""
        async with self._lock:
            conn = self._connections.pop(connection_id, None)
            if conn is not None:
                self._remove_from_room(conn)

        if conn is not None:
            logger.info(f"Connection {connection_id} disconnected")
        return conn

    # === Room Membership ===

    async def add_to_room(self, connection_id: str, room_id: str, role: str) -> Optional[MeetingConnection]:
        async with self._lock:
            conn = self._connections.get(connection_id)
            if conn is None:
                return None

            self._remove_from_room(conn)
            conn.room_id = room_id
            conn.role = role
            self._rooms.setdefault(room_id, {})[connection_id] = conn

        logger.info(f"Connection {connection_id} joined room {room_id} as {role}")
        return conn

    async def remove_from_room(self, connection_id: str) -> Optional[str]:
        async with self._lock:
            conn = self._connections.get(connection_id)
            if conn is None:
                return None
            return self._remove_from_room(conn)

    async def close_room(self, room_id: str) -> List[MeetingConnection]:
        """Drop every member of ``room_id``. Returns the former members."""
        async with self._lock:
            members = list(self._rooms.pop(room_id, {}).values())
            for conn in members:
                conn.room_id = None
                conn.role = None
        return members

    def _remove_from_room(self, conn: MeetingConnection) -> Optional[str]:
        room_id = conn.room_id
        if room_id and room_id in self._rooms:
            self._rooms[room_id].pop(conn.connection_id, None)
            if not self._rooms[room_id]:
                del self._rooms[room_id]
        conn.room_id = None
        conn.role = None
        return room_id

    # === Broadcast Methods ===

    async def broadcast_to_room(
        self,
        room_id: str,
        message: Dict[str, Any],
        exclude: Optional[str] = None
    ) -> int:
        """Send a JSON message to all members of a room."""
        if room_id not in self._rooms:
            return 0

        connections = [
            conn for conn in self._rooms[room_id].values()
            if conn.connection_id != exclude
        ]
        results = await asyncio.gather(*(conn.send_json(message) for conn in connections))
        return sum(1 for sent in results if sent)

    async def send_to(self, connection_id: str, message: Dict[str, Any]) -> bool:
        """Send a message to a specific connection."""
        conn = self._connections.get(connection_id)
        if not conn:
            return False
        return await conn.send_json(message)

    # === Query Methods ===

    def get_connection(self, connection_id: str) -> Optional[MeetingConnection]:
        return self._connections.get(connection_id)

    def get_room_members(self, room_id: str) -> List[str]:
        """Get connection IDs in a room."""
        return list(self._rooms.get(room_id, {}).keys())

    def get_active_room_count(self) -> int:
        return len(self._rooms)

    def get_total_connections(self) -> int:
        return len(self._connections)
