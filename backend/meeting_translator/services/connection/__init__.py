"""
Connection Management Module

Re-exports ConnectionManager and MeetingConnection.
"""
from .models import MeetingConnection, ROLE_HOST, ROLE_ATTENDEE
from .manager import ConnectionManager

# Singleton instance
connection_manager = ConnectionManager()

__all__ = [
    "MeetingConnection",
    "ConnectionManager",
    "connection_manager",
    "ROLE_HOST",
    "ROLE_ATTENDEE",
]
