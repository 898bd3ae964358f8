"""
WebSocket Router - Live Meeting Endpoint

This is the thin routing layer that delegates to MeetingOrchestrator
for all WebSocket session management.
"""
from fastapi import APIRouter, Depends, WebSocket

from meeting_translator.api.deps import get_orchestrator
from meeting_translator.services.session import MeetingOrchestrator

router = APIRouter()


@router.websocket("/ws")
async def ws_endpoint(
    websocket: WebSocket,
    orchestrator: MeetingOrchestrator = Depends(get_orchestrator),
):
    """
    WebSocket endpoint for hosting or attending a meeting.

    Message Types (JSON):
        - host-room: Open a new room (optional sample_rate of host frames)
        - join-room: Join the active room as an attendee
        - end-stream: Host stopped capturing (optional flush)
        - leave: Leave the room
        - ping: Latency check

    Binary Messages:
        - Host audio frames, little-endian float32 mono samples in [-1, 1]

    Server Events:
        - audio-stream: Base64 PCM16 audio of one chunk
        - translated-caption: Transcript and translation of one chunk
    """
    await orchestrator.handle_connection(websocket)
