"""
Session Directory

Tracks the single active meeting room, its membership and its pipeline.
Only one session is modeled: hosting a new room closes the previous one.

Usage:
    from meeting_translator.services.session import session_directory

    session = await session_directory.create(connection_id)
    await session_directory.join(other_connection_id)
    session_directory.submit_audio_frame(connection_id, frame)
"""
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set

from meeting_translator.config.constants import (
    EVENT_ROOM_CLOSED,
    ROOM_ID_ALPHABET,
    ROOM_ID_LENGTH,
)
from meeting_translator.config.settings import settings
from meeting_translator.services.connection import (
    ROLE_ATTENDEE,
    ROLE_HOST,
    ConnectionManager,
    connection_manager,
)
from meeting_translator.services.glossary.store import GlossaryStore
from meeting_translator.services.pipeline.runtime import (
    BroadcastFn,
    MeetingPipeline,
    build_meeting_pipeline,
)

logger = logging.getLogger(__name__)

PipelineFactory = Callable[[str, int, GlossaryStore, BroadcastFn], MeetingPipeline]


@dataclass
class Session:
    """The active room: at most one host, any number of attendees."""
    id: str
    host_id: Optional[str] = None
    attendee_ids: Set[str] = field(default_factory=set)
    sample_rate: int = settings.CAPTURE_SAMPLE_RATE
    created_at: float = field(default_factory=time.time)
    pipeline: Optional[MeetingPipeline] = None

    @property
    def member_ids(self) -> Set[str]:
        members = set(self.attendee_ids)
        if self.host_id:
            members.add(self.host_id)
        return members


def generate_room_id(length: int = ROOM_ID_LENGTH) -> str:
    return "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(length))


class SessionDirectory:
    """
    Keyed store for the single active session.

    Owns the glossary store consulted by the active session's pipeline;
    an upload made before any room exists applies once one is hosted.
    """

    def __init__(
        self,
        connections: ConnectionManager,
        glossary: Optional[GlossaryStore] = None,
        pipeline_factory: PipelineFactory = build_meeting_pipeline,
        flush_partial_chunk: bool = settings.FLUSH_PARTIAL_CHUNK,
    ):
        self.connections = connections
        self.glossary = glossary or GlossaryStore()
        self.pipeline_factory = pipeline_factory
        self.flush_partial_chunk = flush_partial_chunk
        self._active: Optional[Session] = None

    @property
    def active_session(self) -> Optional[Session]:
        return self._active

    # === Lifecycle ===

    async def create(self, connection_id: str, sample_rate: Optional[int] = None) -> Session:
        """Host a new room, replacing any previous one."""
        if self._active is not None:
            await self.close_active("replaced")

        session = Session(
            id=generate_room_id(),
            host_id=connection_id,
            sample_rate=sample_rate or settings.CAPTURE_SAMPLE_RATE,
        )
        session.pipeline = self.pipeline_factory(
            session.id, session.sample_rate, self.glossary, self.broadcast
        )
        await self.connections.add_to_room(connection_id, session.id, ROLE_HOST)
        await session.pipeline.start()

        self._active = session
        logger.info(f"[SessionDirectory] Room created: {session.id} (host {connection_id})")
        return session

    async def join(self, connection_id: str) -> Optional[Session]:
        """Join the active room as an attendee. None when no room exists."""
        session = self._active
        if session is None:
            return None

        if connection_id == session.host_id:
            return session

        await self.connections.add_to_room(connection_id, session.id, ROLE_ATTENDEE)
        session.attendee_ids.add(connection_id)
        logger.info(
            f"[SessionDirectory] {connection_id} joined room {session.id} "
            f"({len(session.attendee_ids)} attendee(s))"
        )
        return session

    async def leave(self, connection_id: str) -> None:
        """
        Remove a member from the active room.

        A leaving host ends the audio stream; in-flight chunks still fan
        out to the remaining attendees.
        """
        session = self._active
        if session is None or connection_id not in session.member_ids:
            await self.connections.remove_from_room(connection_id)
            return

        if connection_id == session.host_id:
            self.end_stream(connection_id)
            session.host_id = None
            logger.info(f"[SessionDirectory] Host left room {session.id}")
        else:
            session.attendee_ids.discard(connection_id)

        await self.connections.remove_from_room(connection_id)

    async def close_active(self, reason: str = "closed") -> None:
        """Stop the active session's pipeline and release its members."""
        session = self._active
        if session is None:
            return
        self._active = None

        if session.pipeline is not None:
            session.pipeline.end_stream(flush=self.flush_partial_chunk)
            await session.pipeline.stop()

        await self.connections.broadcast_to_room(
            session.id, {"type": EVENT_ROOM_CLOSED, "room_id": session.id, "reason": reason}
        )
        await self.connections.close_room(session.id)
        logger.info(f"[SessionDirectory] Room {session.id} closed ({reason})")

    async def shutdown(self) -> None:
        """Close the active room on application exit."""
        await self.close_active("shutdown")

    # === Audio ===

    def is_host(self, connection_id: str) -> bool:
        return self._active is not None and self._active.host_id == connection_id

    def submit_audio_frame(self, connection_id: str, frame) -> int:
        """Feed a host frame into the active pipeline. Non-hosts are ignored."""
        if not self.is_host(connection_id) or self._active.pipeline is None:
            logger.warning(f"[SessionDirectory] Ignoring audio from non-host {connection_id}")
            return 0
        return self._active.pipeline.submit_audio_frame(frame)

    def end_stream(self, connection_id: str, flush: Optional[bool] = None) -> bool:
        if not self.is_host(connection_id) or self._active.pipeline is None:
            return False
        if flush is None:
            flush = self.flush_partial_chunk
        self._active.pipeline.end_stream(flush=flush)
        return True

    # === Fan-out ===

    async def broadcast(self, session_id: str, event_name: str, payload: Dict[str, Any]) -> int:
        """Send ``event_name`` with ``payload`` to every current member."""
        return await self.connections.broadcast_to_room(
            session_id, {"type": event_name, **payload}
        )


# Singleton instance
session_directory = SessionDirectory(connection_manager)
