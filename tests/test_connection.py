"""
Unit tests for the client connection state machine.
"""

from pratchat.client.connection import ConnectionState, ConnectionStateMachine


class TestConnectionStateMachine:
    def setup_method(self):
        self.changes = []
        self.sm = ConnectionStateMachine(
            max_attempts=3,
            base_delay=1.0,
            max_delay=2.5,
            on_change=lambda old, new: self.changes.append((old, new)),
        )

    def test_initial_state(self):
        assert self.sm.state == ConnectionState.DISCONNECTED
        assert self.sm.attempts == 0
        assert self.sm.should_run is True

    def test_connect_flow(self):
        self.sm.begin_connect()
        self.sm.mark_connected()
        assert self.sm.state == ConnectionState.CONNECTED
        assert self.changes == [
            (ConnectionState.DISCONNECTED, ConnectionState.CONNECTING),
            (ConnectionState.CONNECTING, ConnectionState.CONNECTED),
        ]

    def test_linear_capped_delays(self):
        self.sm.begin_connect()
        self.sm.mark_connected()

        delays = [self.sm.next_retry_delay() for _ in range(3)]

        assert delays == [1.0, 2.0, 2.5]
        assert self.sm.state == ConnectionState.RECONNECTING
        assert self.sm.attempts == 3

    def test_reconnect_resets_attempts(self):
        self.sm.begin_connect()
        self.sm.mark_connected()
        self.sm.next_retry_delay()
        self.sm.next_retry_delay()

        self.sm.mark_connected()

        assert self.sm.state == ConnectionState.CONNECTED
        assert self.sm.attempts == 0
        assert self.sm.next_retry_delay() == 1.0

    def test_exceeding_cap_settles_disconnected(self):
        self.sm.begin_connect()
        for _ in range(3):
            assert self.sm.next_retry_delay() is not None

        assert self.sm.next_retry_delay() is None
        assert self.sm.state == ConnectionState.DISCONNECTED
        assert self.sm.exhausted is True
        assert self.sm.should_run is False
        # Stays down
        assert self.sm.next_retry_delay() is None
        assert self.sm.state == ConnectionState.DISCONNECTED

    def test_manual_connect_after_exhaustion(self):
        self.sm.begin_connect()
        for _ in range(4):
            self.sm.next_retry_delay()

        self.sm.begin_connect()

        assert self.sm.state == ConnectionState.CONNECTING
        assert self.sm.attempts == 0
        assert self.sm.should_run is True

    def test_teardown_suppresses_retries(self):
        self.sm.begin_connect()
        self.sm.mark_connected()

        assert self.sm.teardown() is True
        assert self.sm.state == ConnectionState.DISCONNECTED
        assert self.sm.next_retry_delay() is None
        assert self.sm.exhausted is False

    def test_teardown_is_idempotent(self):
        self.sm.begin_connect()
        self.sm.mark_connected()
        self.sm.teardown()
        count = len(self.changes)

        assert self.sm.teardown() is False
        assert len(self.changes) == count
        assert self.sm.state == ConnectionState.DISCONNECTED

    def test_handshake_after_teardown_is_ignored(self):
        self.sm.begin_connect()
        self.sm.teardown()

        assert self.sm.mark_connected() is False
        assert self.sm.state == ConnectionState.DISCONNECTED
        assert self.sm.should_run is False
