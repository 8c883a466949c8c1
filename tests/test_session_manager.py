"""
Unit tests for the SessionManager.
"""

import pytest

from pratchat.session.manager import SessionManager
from pratchat.session.ws_session import ChatSession


class TestSessionManager:
    @pytest.fixture(autouse=True)
    def _setup(self, mock_ws, echo_generator):
        self.manager = SessionManager()
        self.ws = mock_ws
        self.generator = echo_generator

    def _session(self, session_id="s1"):
        return ChatSession(self.ws, session_id, self.generator)

    def test_register_and_list(self):
        self.manager.register_session(self._session())

        sessions = self.manager.list_sessions()
        assert len(sessions) == 1
        assert sessions[0]["session_id"] == "s1"
        assert "transcript" not in sessions[0]

    def test_sessions_have_separate_transcripts(self):
        a = self._session("a")
        b = self._session("b")
        self.manager.register_session(a)
        self.manager.register_session(b)

        assert a.transcript is not b.transcript
        assert self.manager.connected_count == 2

    @pytest.mark.asyncio
    async def test_exchange_only_touches_own_transcript(self):
        a = self._session("a")
        b = self._session("b")
        self.manager.register_session(a)
        self.manager.register_session(b)

        await a.handle_user_message("hello")

        assert len(a.transcript) == 2
        assert len(b.transcript) == 0

    def test_unregister(self):
        session = self._session()
        self.manager.register_session(session)

        assert self.manager.unregister_session("s1") is True
        assert self.manager.list_sessions() == []
        assert session.status == "disconnected"

    def test_unregister_twice(self):
        self.manager.register_session(self._session())
        assert self.manager.unregister_session("s1") is True
        assert self.manager.unregister_session("s1") is False

    def test_describe_includes_transcript(self):
        self.manager.register_session(self._session())
        info = self.manager.describe_session("s1")
        assert info["transcript"] == []

    def test_describe_unknown(self):
        assert self.manager.describe_session("nope") is None

    @pytest.mark.asyncio
    async def test_close_all(self):
        self.manager.register_session(self._session("a"))
        self.manager.register_session(self._session("b"))

        await self.manager.close_all()

        assert self.manager.sessions == {}
