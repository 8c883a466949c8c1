"""
Unit tests for the in-memory transcript.
"""

import pytest

from pratchat.session.transcript import Transcript, Turn


class TestTurn:
    def test_to_dict(self):
        turn = Turn(role="user", content="hello")
        assert turn.to_dict() == {"role": "user", "content": "hello"}

    def test_turn_is_immutable(self):
        turn = Turn(role="model", content="hi")
        with pytest.raises(AttributeError):
            turn.content = "changed"


class TestTranscript:
    def setup_method(self):
        self.transcript = Transcript()

    def test_starts_empty_expecting_user(self):
        assert len(self.transcript) == 0
        assert self.transcript.expected_role() == "user"

    def test_commit_exchange(self):
        self.transcript.commit_exchange(
            Turn(role="user", content="hello"), Turn(role="model", content="hi")
        )
        assert self.transcript.to_list() == [
            {"role": "user", "content": "hello"},
            {"role": "model", "content": "hi"},
        ]

    def test_rejects_model_first(self):
        with pytest.raises(ValueError, match="expects a 'user' turn"):
            self.transcript.append(Turn(role="model", content="hi"))

    def test_rejects_two_user_turns(self):
        self.transcript.append(Turn(role="user", content="a"))
        with pytest.raises(ValueError, match="expects a 'model' turn"):
            self.transcript.append(Turn(role="user", content="b"))

    def test_with_pending_does_not_commit(self):
        pending = Turn(role="user", content="hello")
        history = self.transcript.with_pending(pending)
        assert history == [pending]
        assert len(self.transcript) == 0

    def test_turns_returns_copy(self):
        self.transcript.append(Turn(role="user", content="a"))
        turns = self.transcript.turns
        turns.clear()
        assert len(self.transcript) == 1

    def test_alternates_over_many_exchanges(self):
        for i in range(5):
            self.transcript.commit_exchange(
                Turn(role="user", content=f"q{i}"),
                Turn(role="model", content=f"a{i}"),
            )
        roles = [t.role for t in self.transcript]
        assert roles == ["user", "model"] * 5
