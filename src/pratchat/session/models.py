"""
Pydantic models for the chat session.

Covers:
- WebSocket protocol messages (user-message, assistant-reply, assistant-error)
- REST API response schemas
"""

from typing import Literal

from pydantic import BaseModel, Field

# ─── Event names ─────────────────────────────────────────────────────

USER_MESSAGE = "user-message"
ASSISTANT_REPLY = "assistant-reply"
ASSISTANT_ERROR = "assistant-error"
SESSION_STARTED = "session-started"
PROTOCOL_ERROR = "error"


# ─── WebSocket Protocol Messages ─────────────────────────────────────


class UserMessage(BaseModel):
    """Client → Server: submit one user turn."""

    type: Literal["user-message"] = USER_MESSAGE
    text: str


class AssistantReply(BaseModel):
    """Server → Client: full text of the model's reply."""

    type: Literal["assistant-reply"] = ASSISTANT_REPLY
    text: str


class AssistantError(BaseModel):
    """Server → Client: the generation call failed for the last user turn."""

    type: Literal["assistant-error"] = ASSISTANT_ERROR
    reason: str


class SessionStarted(BaseModel):
    """Server → Client: sent once, right after the socket is accepted."""

    type: Literal["session-started"] = SESSION_STARTED
    session_id: str


class ErrorResponse(BaseModel):
    """Server → Client: malformed or unknown frame."""

    type: Literal["error"] = PROTOCOL_ERROR
    message: str


# ─── REST API Models ─────────────────────────────────────────────────


class TurnInfo(BaseModel):
    role: Literal["user", "model"]
    content: str


class SessionInfo(BaseModel):
    """Serialized session info for API responses."""

    session_id: str
    status: str
    connected_at: str
    turn_count: int
    transcript: list[TurnInfo] | None = None


class SessionListResponse(BaseModel):
    """GET /sessions response."""

    sessions: list[SessionInfo]
    count: int


class GreetingResponse(BaseModel):
    """GET /api/hello response."""

    message: str = Field(..., description="Greeting shown as the first chat bubble")
