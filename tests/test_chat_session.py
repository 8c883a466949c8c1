"""
Unit tests for ChatSession message handling.
"""

import json

import pytest
from starlette.websockets import WebSocketDisconnect

from pratchat.session.transcript import Turn
from pratchat.session.ws_session import ChatSession


def _session(ws, generator, session_id="sess-1"):
    return ChatSession(websocket=ws, session_id=session_id, generator=generator)


class TestUserMessage:
    @pytest.mark.asyncio
    async def test_hello_hi_round_trip(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        result = await session.handle_user_message("hello")

        assert result.ok is True
        assert mock_ws.sent == [{"type": "assistant-reply", "text": "hi"}]
        assert session.transcript.to_list() == [
            {"role": "user", "content": "hello"},
            {"role": "model", "content": "hi"},
        ]

    @pytest.mark.asyncio
    async def test_generator_receives_full_history(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_user_message("one")
        await session.handle_user_message("two")

        assert echo_generator.calls[1] == [
            Turn(role="user", content="one"),
            Turn(role="model", content="hi"),
            Turn(role="user", content="two"),
        ]

    @pytest.mark.asyncio
    async def test_empty_text_is_accepted(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_user_message("")

        assert echo_generator.calls == [[Turn(role="user", content="")]]
        assert mock_ws.sent[0]["type"] == "assistant-reply"

    @pytest.mark.asyncio
    async def test_failure_emits_assistant_error(self, mock_ws, failing_generator):
        session = _session(mock_ws, failing_generator)

        result = await session.handle_user_message("hello")

        assert result.ok is False
        assert len(mock_ws.sent) == 1
        assert mock_ws.sent[0]["type"] == "assistant-error"
        assert "quota exceeded" in mock_ws.sent[0]["reason"]

    @pytest.mark.asyncio
    async def test_failure_keeps_transcript_alternating(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)
        calls = {"n": 0}

        async def flaky(turns):
            calls["n"] += 1
            if calls["n"] == 2:
                raise RuntimeError("model error")
            return await echo_generator(turns)

        session._generator = flaky

        await session.handle_user_message("first")
        await session.handle_user_message("second")
        await session.handle_user_message("third")

        roles = [t.role for t in session.transcript]
        assert roles == ["user", "model", "user", "model"]
        assert [t.content for t in session.transcript][::2] == ["first", "third"]
        # The generator never sees two user turns in a row
        last_history = echo_generator.calls[-1]
        assert [t.role for t in last_history] == ["user", "model", "user"]


class TestHandleMessage:
    @pytest.mark.asyncio
    async def test_dispatches_user_message(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_message(json.dumps({"type": "user-message", "text": "yo"}))

        assert mock_ws.sent == [{"type": "assistant-reply", "text": "hi"}]

    @pytest.mark.asyncio
    async def test_invalid_json(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_message("{not json")

        assert mock_ws.sent[0]["type"] == "error"
        assert echo_generator.calls == []

    @pytest.mark.asyncio
    async def test_unknown_type(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_message(json.dumps({"type": "ai-msg", "text": "x"}))

        assert mock_ws.sent[0]["type"] == "error"
        assert "ai-msg" in mock_ws.sent[0]["message"]

    @pytest.mark.asyncio
    async def test_missing_text(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)

        await session.handle_message(json.dumps({"type": "user-message"}))

        assert mock_ws.sent[0]["type"] == "error"
        assert echo_generator.calls == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_announces_session_id(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator, session_id="abc")
        await session.start()
        assert mock_ws.sent == [{"type": "session-started", "session_id": "abc"}]

    @pytest.mark.asyncio
    async def test_no_emission_after_close(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)
        await session.close()

        await session.handle_user_message("hello")

        assert mock_ws.sent == []

    @pytest.mark.asyncio
    async def test_close_twice(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator)
        await session.close()
        await session.close()
        assert session.status == "disconnected"

    @pytest.mark.asyncio
    async def test_send_failure_marks_disconnected(self, mock_ws, echo_generator):
        mock_ws.send_json.side_effect = WebSocketDisconnect(code=1006)
        session = _session(mock_ws, echo_generator)

        result = await session.handle_user_message("hello")

        assert result.ok is True
        assert session.closed

    def test_to_dict(self, mock_ws, echo_generator):
        session = _session(mock_ws, echo_generator, session_id="xyz")
        info = session.to_dict(include_transcript=True)
        assert info["session_id"] == "xyz"
        assert info["status"] == "connected"
        assert info["turn_count"] == 0
        assert info["transcript"] == []
        assert "transcript" not in session.to_dict()
