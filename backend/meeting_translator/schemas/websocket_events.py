"""
WebSocket Event Schemas

Pydantic models for type-safe WebSocket event handling.
"""

import base64
from typing import TYPE_CHECKING, Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

if TYPE_CHECKING:
    from meeting_translator.services.pipeline.models import PipelineResult


# =============================================================================
# Client -> Server Events
# =============================================================================

class WebSocketEventBase(BaseModel):
    """Base model for all WebSocket events."""
    type: str


class HostRoomEvent(WebSocketEventBase):
    """Host requests a new room. Optional capture rate of its frames."""
    type: Literal["host-room"] = "host-room"
    sample_rate: Optional[int] = Field(None, gt=0)


class JoinRoomEvent(WebSocketEventBase):
    """Attendee asks to join the active room."""
    type: Literal["join-room"] = "join-room"


class EndStreamEvent(WebSocketEventBase):
    """Host stopped capturing; the trailing partial chunk may be flushed."""
    type: Literal["end-stream"] = "end-stream"
    flush: Optional[bool] = None


class LeaveEvent(WebSocketEventBase):
    """Client requests to leave the room."""
    type: Literal["leave"] = "leave"


class PingEvent(WebSocketEventBase):
    """Simple ping for latency check."""
    type: Literal["ping"] = "ping"


ClientEvent = Annotated[
    Union[HostRoomEvent, JoinRoomEvent, EndStreamEvent, LeaveEvent, PingEvent],
    Field(discriminator="type"),
]

client_event_adapter = TypeAdapter(ClientEvent)


# =============================================================================
# Fan-out Payloads
# =============================================================================

class AudioStreamPayload(BaseModel):
    """Original capture-rate audio of one chunk, for attendee playback."""
    sequence: int
    timestamp: int
    sample_rate: int
    audio: str  # base64 s16le mono

    @classmethod
    def from_result(cls, result: "PipelineResult") -> "AudioStreamPayload":
        chunk = result.chunk
        return cls(
            sequence=chunk.sequence,
            timestamp=chunk.timestamp_ms,
            sample_rate=chunk.sample_rate,
            audio=base64.b64encode(chunk.to_bytes()).decode("ascii"),
        )


class CaptionPayload(BaseModel):
    """Caption record; transcript and translation may be empty strings."""
    sequence: int
    transcript: str
    translation: str
    timestamp: int

    @classmethod
    def from_result(cls, result: "PipelineResult") -> "CaptionPayload":
        return cls(
            sequence=result.sequence,
            transcript=result.transcript.text,
            translation=result.translation.translated_text,
            timestamp=result.chunk.timestamp_ms,
        )
