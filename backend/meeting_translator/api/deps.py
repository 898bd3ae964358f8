from meeting_translator.services.session import (
    MeetingOrchestrator,
    SessionDirectory,
    meeting_orchestrator,
    session_directory,
)


def get_session_directory() -> SessionDirectory:
    """
    Dependency for the active session directory.
    Overridden in tests with an isolated instance.
    """
    return session_directory


def get_orchestrator() -> MeetingOrchestrator:
    return meeting_orchestrator
