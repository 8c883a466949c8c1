"""
Manager for live chat sessions.
Responsible for the per-connection session registry and lookup.
"""

from typing import Any

from pratchat.logger import get_logger
from pratchat.session.ws_session import ChatSession

logger = get_logger(__name__)


class SessionManager:
    """
    Registry of connected sessions, keyed by session id.

    Each session owns its own transcript; nothing is shared between entries.
    """

    def __init__(self):
        self.sessions: dict[str, ChatSession] = {}

    def register_session(self, session: ChatSession) -> None:
        """
        Add a session to the registry.

        Args:
            session: The freshly accepted session.
        """
        logger.info(f"Registering session {session.session_id}")
        self.sessions[session.session_id] = session

    def unregister_session(self, session_id: str) -> bool:
        """
        Remove a session from the registry, releasing its transcript.

        Args:
            session_id: The unique ID of the session to remove.

        Returns:
            True if the session was found and removed, False otherwise.
        """
        session = self.sessions.pop(session_id, None)
        if session:
            session.status = "disconnected"
            logger.info(
                f"Unregistered session {session_id} "
                f"({len(session.transcript)} turns released)"
            )
            return True
        logger.debug(f"Session already unregistered: {session_id}")
        return False

    def get_session(self, session_id: str) -> ChatSession | None:
        return self.sessions.get(session_id)

    def list_sessions(self) -> list[dict[str, Any]]:
        """
        List all registered sessions without their transcripts.

        Returns:
            List of session info dicts.
        """
        return [session.to_dict() for session in self.sessions.values()]

    def describe_session(self, session_id: str) -> dict[str, Any] | None:
        """Session info including the transcript, or None if not found."""
        session = self.get_session(session_id)
        if session:
            return session.to_dict(include_transcript=True)
        return None

    async def close_all(self) -> None:
        """Close and unregister every session (application shutdown)."""
        for session in list(self.sessions.values()):
            await session.close()
            self.unregister_session(session.session_id)

    @property
    def connected_count(self) -> int:
        """Number of currently connected sessions."""
        return sum(1 for s in self.sessions.values() if s.status == "connected")
