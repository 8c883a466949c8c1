"""
Routes for chat sessions.

Provides:
- WebSocket endpoint for chat connections (/ws/chat)
- REST endpoints for listing and describing live sessions
"""

import uuid

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.websockets import WebSocket, WebSocketDisconnect

from pratchat.logger import get_logger
from pratchat.session.manager import SessionManager
from pratchat.session.models import SessionInfo, SessionListResponse
from pratchat.session.ws_session import ChatSession

logger = get_logger(__name__)


def _get_session_manager(request_or_ws) -> SessionManager | None:
    """Get SessionManager from app state."""
    app = getattr(request_or_ws, "app", None)
    if app is None:
        return None
    return getattr(app.state, "session_manager", None)


async def chat_websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for chat connections.

    Protocol:
        1. Client connects to /ws/chat
        2. Server sends: {"type": "session-started", "session_id": "..."}
        3. Client sends: {"type": "user-message", "text": "..."}
        4. Server answers each with assistant-reply or assistant-error

    Frames are handled one at a time, so replies on a connection stay in order.
    """
    session_manager = _get_session_manager(websocket)
    generator = getattr(websocket.app.state, "generator", None)
    if not session_manager or generator is None:
        await websocket.close(code=1011, reason="Chat system not initialized")
        return

    await websocket.accept()

    session = ChatSession(
        websocket=websocket,
        session_id=str(uuid.uuid4()),
        generator=generator,
    )
    session_manager.register_session(session)
    logger.info(f"Client connected: session {session.session_id}")

    try:
        await session.start()

        while True:
            raw = await websocket.receive_text()
            await session.handle_message(raw)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected: session {session.session_id}")
    except Exception as e:
        logger.error(f"Chat WebSocket error on session {session.session_id}: {e}")
    finally:
        await session.close()
        session_manager.unregister_session(session.session_id)


async def list_sessions(request: Request) -> JSONResponse:
    """GET /sessions: List all live sessions."""
    session_manager = _get_session_manager(request)
    if not session_manager:
        return JSONResponse({"sessions": [], "error": "Chat system not initialized"})

    sessions = session_manager.list_sessions()
    resp = SessionListResponse(
        sessions=[SessionInfo(**s) for s in sessions],
        count=len(sessions),
    )
    return JSONResponse(resp.model_dump(exclude_none=True))


async def describe_session(request: Request) -> JSONResponse:
    """GET /sessions/{session_id}: One session including its transcript."""
    session_manager = _get_session_manager(request)
    session_id = request.path_params.get("session_id", "")

    if not session_manager:
        return JSONResponse({"error": "Chat system not initialized"}, status_code=503)

    info = session_manager.describe_session(session_id)
    if not info:
        return JSONResponse(
            {"error": f"Session not found: {session_id}"}, status_code=404
        )

    return JSONResponse(SessionInfo(**info).model_dump())
