"""
WebSocket-backed chat session.

A ChatSession wraps one Starlette WebSocket connection and owns that
connection's Transcript. Every user-message ends in exactly one terminating
event: assistant-reply on success, assistant-error on failure.

Protocol:
    Server -> Client (on accept):
        {"type": "session-started", "session_id": "uuid"}

    Client -> Server:
        {"type": "user-message", "text": "hello"}

    Server -> Client:
        {"type": "assistant-reply", "text": "hi"}
        {"type": "assistant-error", "reason": "..."}
        {"type": "error", "message": "..."}   (malformed frame)
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from pratchat.llm import Generator, GenerationResult, run_generation
from pratchat.logger import get_logger
from pratchat.session.models import (
    USER_MESSAGE,
    AssistantError,
    AssistantReply,
    ErrorResponse,
    SessionStarted,
    UserMessage,
)
from pratchat.session.transcript import Transcript, Turn

logger = get_logger(__name__)


class ChatSession:
    """One client connection and its private transcript."""

    def __init__(self, websocket: WebSocket, session_id: str, generator: Generator):
        self._ws = websocket
        self._generator = generator
        self.session_id = session_id
        self.transcript = Transcript()
        self.status: str = "connected"
        self.connected_at: datetime = datetime.now()

    @property
    def closed(self) -> bool:
        return self.status == "disconnected"

    async def _emit(self, message: BaseModel) -> bool:
        """Send an event to this session's client. No-op once closed."""
        if self.closed:
            logger.debug(
                f"Dropping '{message.type}' for closed session {self.session_id}"
            )
            return False
        try:
            await self._ws.send_json(message.model_dump())
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(f"Send failed on session {self.session_id}: {e}")
            self.status = "disconnected"
            return False

    async def start(self) -> None:
        """Announce the session id to the client."""
        await self._emit(SessionStarted(session_id=self.session_id))

    async def handle_user_message(self, text: str) -> GenerationResult:
        """
        Run one exchange: stage the user turn, call the generator with the
        full history, commit the round trip and reply.

        Args:
            text: The user's message. Any string, including empty.

        Returns:
            The generation result that was reported to the client.
        """
        user_turn = Turn(role="user", content=text)
        logger.info(
            f"Session {self.session_id}: user message ({len(text)} chars), "
            f"history={len(self.transcript)} turns"
        )

        result = await run_generation(
            self._generator, self.transcript.with_pending(user_turn)
        )

        if result.ok:
            self.transcript.commit_exchange(
                user_turn, Turn(role="model", content=result.text)
            )
            await self._emit(AssistantReply(text=result.text))
            logger.info(
                f"Session {self.session_id}: replied ({len(result.text)} chars)"
            )
        else:
            await self._emit(AssistantError(reason=result.error))

        return result

    async def handle_message(self, raw: str) -> None:
        """Parse and dispatch one inbound frame."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            await self._emit(ErrorResponse(message="Frame is not valid JSON"))
            return

        msg_type = data.get("type") if isinstance(data, dict) else None

        if msg_type == USER_MESSAGE:
            try:
                msg = UserMessage(**data)
            except ValidationError as e:
                await self._emit(ErrorResponse(message=f"Invalid user-message: {e}"))
                return
            await self.handle_user_message(msg.text)
        else:
            logger.warning(
                f"Unknown message type '{msg_type}' on session {self.session_id}"
            )
            await self._emit(ErrorResponse(message=f"Unknown message type: {msg_type}"))

    def to_dict(self, include_transcript: bool = False) -> dict[str, Any]:
        """Serialize session info for API responses."""
        info: dict[str, Any] = {
            "session_id": self.session_id,
            "status": self.status,
            "connected_at": self.connected_at.isoformat(),
            "turn_count": len(self.transcript),
        }
        if include_transcript:
            info["transcript"] = self.transcript.to_list()
        return info

    async def close(self) -> None:
        """Stop emitting for this session. Safe to call more than once."""
        if self.closed:
            return
        self.status = "disconnected"
        logger.debug(f"Session {self.session_id} closed")
