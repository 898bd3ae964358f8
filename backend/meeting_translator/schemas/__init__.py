"""
Schemas Package

Pydantic models for API and WebSocket events.
"""

from meeting_translator.schemas.websocket_events import (
    WebSocketEventBase,
    HostRoomEvent,
    JoinRoomEvent,
    EndStreamEvent,
    LeaveEvent,
    PingEvent,
    ClientEvent,
    client_event_adapter,
    AudioStreamPayload,
    CaptionPayload,
)
from meeting_translator.schemas.glossary import GlossaryUploadRequest, GlossaryUploadResponse

__all__ = [
    "WebSocketEventBase",
    "HostRoomEvent",
    "JoinRoomEvent",
    "EndStreamEvent",
    "LeaveEvent",
    "PingEvent",
    "ClientEvent",
    "client_event_adapter",
    "AudioStreamPayload",
    "CaptionPayload",
    "GlossaryUploadRequest",
    "GlossaryUploadResponse",
]
