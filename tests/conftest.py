"""Shared pytest fixtures and configuration."""

from unittest.mock import AsyncMock

import pytest

from pratchat.server import create_app


class EchoGenerator:
    """Generator stand-in that records every transcript it is called with."""

    def __init__(self, reply: str = "hi"):
        self.reply = reply
        self.calls: list[list] = []

    async def __call__(self, turns):
        self.calls.append(list(turns))
        return self.reply


class FailingGenerator:
    def __init__(self, message: str = "quota exceeded"):
        self.message = message
        self.calls = 0

    async def __call__(self, turns):
        self.calls += 1
        raise RuntimeError(self.message)


@pytest.fixture
def echo_generator():
    return EchoGenerator()


@pytest.fixture
def failing_generator():
    return FailingGenerator()


@pytest.fixture
def mock_ws():
    """A Starlette WebSocket double recording sent JSON frames."""
    ws = AsyncMock()
    ws.sent = []

    async def _send_json(data):
        ws.sent.append(data)

    ws.send_json.side_effect = _send_json
    return ws


@pytest.fixture
def app(echo_generator):
    return create_app(generator=echo_generator)
