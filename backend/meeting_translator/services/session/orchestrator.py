import logging
import uuid
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from meeting_translator.schemas.websocket_events import (
    ClientEvent,
    EndStreamEvent,
    HostRoomEvent,
    JoinRoomEvent,
    LeaveEvent,
    PingEvent,
    client_event_adapter,
)
from meeting_translator.services.audio.pcm import decode_float32_frame
from meeting_translator.services.connection import ConnectionManager, connection_manager
from meeting_translator.services.session.directory import SessionDirectory, session_directory

logger = logging.getLogger(__name__)


class MeetingOrchestrator:
    """
    Orchestrates the lifecycle of a meeting WebSocket connection.
    Handles:
    - Connection registration
    - Message loop processing (control events and host audio frames)
    - Cleanup on disconnect
    """

    def __init__(
        self,
        connections: Optional[ConnectionManager] = None,
        directory: Optional[SessionDirectory] = None,
    ):
        self.connection_manager = connections or connection_manager
        self.directory = directory or session_directory

    async def handle_connection(self, websocket: WebSocket):
        """
        Main entry point for handling a WebSocket connection.
        """
        await websocket.accept()
        connection_id = uuid.uuid4().hex

        await self.connection_manager.connect(websocket, connection_id)
        await self.connection_manager.send_to(
            connection_id, {"type": "connected", "connection_id": connection_id}
        )

        await self._message_loop(websocket, connection_id)

    async def _message_loop(self, websocket: WebSocket, connection_id: str):
        """
        Main message processing loop.
        """
        try:
            while True:
                message = await websocket.receive()

                if message["type"] == "websocket.disconnect":
                    logger.info(f"[Orchestrator] {connection_id} disconnected")
                    break

                if message.get("bytes") is not None:
                    await self._handle_audio_message(message["bytes"], connection_id)
                elif message.get("text") is not None:
                    keep_open = await self._handle_text_message(message["text"], connection_id)
                    if not keep_open:
                        break
                else:
                    logger.warning(f"[Orchestrator] Unexpected message structure from {connection_id}")

        except WebSocketDisconnect:
            logger.info(f"[Orchestrator] {connection_id} disconnected")

        except Exception as e:
            logger.error(f"[Orchestrator] Error during message loop: {e}")

        finally:
            await self._cleanup(connection_id)

    async def _handle_text_message(self, text_data: str, connection_id: str) -> bool:
        """
        Handle JSON control messages. Returns False when the client asked to leave.
        """
        try:
            event: ClientEvent = client_event_adapter.validate_json(text_data)
        except ValidationError as e:
            logger.warning(f"[Orchestrator] Invalid event from {connection_id}: {e.error_count()} error(s)")
            await self._send_error(connection_id, "Invalid event")
            return True

        if isinstance(event, HostRoomEvent):
            try:
                session = await self.directory.create(connection_id, sample_rate=event.sample_rate)
            except (RuntimeError, ValueError) as e:
                logger.error(f"[Orchestrator] Could not create room for {connection_id}: {e}")
                await self._send_error(connection_id, "Could not create room")
                return True
            await self.connection_manager.send_to(connection_id, {
                "type": "room-created",
                "room_id": session.id,
                "sample_rate": session.sample_rate,
            })

        elif isinstance(event, JoinRoomEvent):
            session = await self.directory.join(connection_id)
            if session is None:
                await self.connection_manager.send_to(connection_id, {"type": "no-room"})
            else:
                await self.connection_manager.send_to(connection_id, {
                    "type": "room-joined",
                    "room_id": session.id,
                    "sample_rate": session.sample_rate,
                })

        elif isinstance(event, EndStreamEvent):
            if not self.directory.end_stream(connection_id, flush=event.flush):
                await self._send_error(connection_id, "Only the host can end the stream")

        elif isinstance(event, LeaveEvent):
            logger.info(f"[Orchestrator] {connection_id} requested to leave")
            return False

        elif isinstance(event, PingEvent):
            await self.connection_manager.send_to(connection_id, {"type": "pong"})

        return True

    async def _handle_audio_message(self, audio_data: bytes, connection_id: str):
        """
        Handle a binary float32 audio frame from the host.
        """
        if len(audio_data) == 0:
            return

        try:
            frame = decode_float32_frame(audio_data)
        except ValueError as e:
            logger.warning(f"[Orchestrator] Dropping malformed frame from {connection_id}: {e}")
            await self._send_error(connection_id, "Malformed audio frame")
            return

        self.directory.submit_audio_frame(connection_id, frame)

    async def _send_error(self, connection_id: str, message: str):
        await self.connection_manager.send_to(connection_id, {"type": "error", "message": message})

    async def _cleanup(self, connection_id: str):
        """
        Leave the room and drop the connection.
        """
        try:
            await self.directory.leave(connection_id)
        finally:
            await self.connection_manager.disconnect(connection_id)


# Singleton instance
meeting_orchestrator = MeetingOrchestrator()
