"""
Connection lifecycle for the chat client.

    disconnected -> connecting -> connected
    connected -> reconnecting            (connection lost)
    reconnecting -> connected            (attempt counter reset to 0)
    reconnecting -> disconnected         (attempts exhausted, terminal notice)
    any -> disconnected                  (manual teardown, no more retries)

Retry delays grow linearly with the attempt number and are capped.
"""

from enum import Enum
from typing import Callable, Optional

from pratchat.logger import get_logger

logger = get_logger(__name__)


class TransportError(ConnectionError):
    """The connection to the relay dropped, was refused, or is not open."""


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


class ConnectionStateMachine:
    """Tracks connection state and decides whether and when to retry.

    Args:
        max_attempts: Reconnect attempts allowed before giving up.
        base_delay: Delay before the first retry; attempt n waits n * base_delay.
        max_delay: Upper bound for any single retry delay.
        on_change: Called with (old_state, new_state) on every transition.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        base_delay: float = 1.0,
        max_delay: float = 5.0,
        on_change: Optional[
            Callable[[ConnectionState, ConnectionState], None]
        ] = None,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._on_change = on_change

        self.state = ConnectionState.DISCONNECTED
        self.attempts = 0
        self.exhausted = False
        self.torn_down = False

    def _transition(self, new_state: ConnectionState) -> None:
        old_state = self.state
        if old_state == new_state:
            return
        self.state = new_state
        logger.debug(f"Connection state: {old_state.value} -> {new_state.value}")
        if self._on_change:
            self._on_change(old_state, new_state)

    @property
    def should_run(self) -> bool:
        """True while the client should keep trying to be connected."""
        return not self.torn_down and not self.exhausted

    def begin_connect(self) -> None:
        """Manual (re)connect: start over with a fresh attempt budget."""
        self.attempts = 0
        self.exhausted = False
        self.torn_down = False
        self._transition(ConnectionState.CONNECTING)

    def mark_connected(self) -> bool:
        """Record a completed handshake. Returns False once torn down."""
        if self.torn_down:
            return False
        self.attempts = 0
        self._transition(ConnectionState.CONNECTED)
        return True

    def next_retry_delay(self) -> Optional[float]:
        """
        Record a lost or failed connection and plan the next attempt.

        Returns:
            Seconds to wait before retrying, or None when no retry should
            happen (torn down, or the attempt cap was reached).
        """
        if self.torn_down:
            return None

        if self.attempts >= self.max_attempts:
            self.exhausted = True
            logger.warning(
                f"Giving up after {self.attempts} reconnect attempts"
            )
            self._transition(ConnectionState.DISCONNECTED)
            return None

        self.attempts += 1
        self._transition(ConnectionState.RECONNECTING)
        return min(self.base_delay * self.attempts, self.max_delay)

    def teardown(self) -> bool:
        """
        Stop for good. Idempotent.

        Returns:
            True if this call changed anything, False if already torn down.
        """
        if self.torn_down:
            return False
        self.torn_down = True
        self._transition(ConnectionState.DISCONNECTED)
        return True
