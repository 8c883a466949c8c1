"""
Starlette-based relay server for PratChat.

This server provides the following endpoints:
- /ws/chat: WebSocket chat sessions (user-message -> assistant-reply)
- /api/hello: Greeting payload for the client
- /health: Liveness check
- /sessions: List and inspect live sessions

Run with:
    python -m pratchat.server [--debug]
    pratchat serve
"""

import os
import sys
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route, WebSocketRoute

from pratchat.config import CONFIG
from pratchat.llm import Generator, LLMClient
from pratchat.logger import get_logger, setup_logging
from pratchat.routes.chat_routes import (
    chat_websocket_endpoint,
    describe_session,
    list_sessions,
)
from pratchat.routes.health_routes import health_check, hello
from pratchat.session.manager import SessionManager

# Setup logging
if "--debug" in sys.argv:
    os.environ["LOG_LEVEL"] = "DEBUG"

setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), log_file=os.getenv("LOG_FILE"))

logger = get_logger(__name__)


def create_app(generator: Generator | None = None, debug: bool = False) -> Starlette:
    """
    Build the relay application.

    Args:
        generator: Async callable turning a transcript into reply text.
            Defaults to an LLMClient for CONFIG.model.
        debug: Starlette debug mode.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("Application startup - initializing chat sessions")
        app.state.session_manager = SessionManager()
        app.state.generator = generator or LLMClient()
        logger.info(f"Generation backend ready (model={CONFIG.model})")

        yield

        logger.info("Application shutdown - closing sessions")
        await app.state.session_manager.close_all()

    return Starlette(
        debug=debug,
        routes=[
            Route("/api/hello", hello, methods=["GET"]),
            Route("/health", health_check, methods=["GET"]),
            Route("/sessions", list_sessions, methods=["GET"]),
            Route("/sessions/{session_id}", describe_session, methods=["GET"]),
            WebSocketRoute("/ws/chat", chat_websocket_endpoint),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=CONFIG.cors_origins,
                allow_methods=["GET", "POST"],
                allow_headers=["*"],
                allow_credentials=True,
            )
        ],
        lifespan=lifespan,
    )


app = create_app(debug="--debug" in sys.argv)


def main(host: str | None = None, port: int | None = None) -> None:
    """Run the relay with uvicorn."""
    import uvicorn

    host = host or CONFIG.host
    port = port or CONFIG.port
    logger.info(f"Server is running on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
