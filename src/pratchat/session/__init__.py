"""
Server-side chat sessions for PratChat.

Each WebSocket connection gets a ChatSession with its own append-only
Transcript; the SessionManager keeps the registry of live sessions.
"""

from pratchat.session.manager import SessionManager
from pratchat.session.models import (
    AssistantError,
    AssistantReply,
    ErrorResponse,
    SessionInfo,
    SessionListResponse,
    SessionStarted,
    UserMessage,
)
from pratchat.session.transcript import Transcript, Turn
from pratchat.session.ws_session import ChatSession

__all__ = [
    "ChatSession",
    "SessionManager",
    "Transcript",
    "Turn",
    "AssistantError",
    "AssistantReply",
    "ErrorResponse",
    "SessionInfo",
    "SessionListResponse",
    "SessionStarted",
    "UserMessage",
]
