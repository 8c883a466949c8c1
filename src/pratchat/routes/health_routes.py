"""
Greeting and health check endpoints.
"""

import time
from datetime import datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

from pratchat.config import CONFIG
from pratchat.session.models import GreetingResponse

start_time = time.time()


async def hello(request: Request) -> JSONResponse:
    """GET /api/hello: Greeting shown before the first exchange."""
    return JSONResponse(GreetingResponse(message=CONFIG.greeting).model_dump())


async def health_check(request: Request) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    session_manager = getattr(request.app.state, "session_manager", None)
    return JSONResponse(
        {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": int(time.time() - start_time),
            "sessions": session_manager.connected_count if session_manager else 0,
        }
    )
