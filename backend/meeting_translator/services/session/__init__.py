"""
Session management module.

Provides the SessionDirectory for the active room and the
MeetingOrchestrator for WebSocket message handling.
"""
from .directory import Session, SessionDirectory, session_directory
from .orchestrator import MeetingOrchestrator, meeting_orchestrator

__all__ = ["Session", "SessionDirectory", "session_directory", "MeetingOrchestrator", "meeting_orchestrator"]
