"""
Two-deadline tracking for the single in-flight request.

    idle --send--> awaiting
    awaiting --soft deadline--> awaiting   (one "still working" notice)
    awaiting --hard deadline--> idle       (one apology)
    awaiting --reply/error--> idle

Each send gets a new request token. Timer callbacks carry the token they were
scheduled with and do nothing if it is no longer current, so a timer that
fires after the reply (or after a newer send) has no effect.
"""

import asyncio
from typing import Optional

from pratchat.client.models import ChatLog
from pratchat.logger import get_logger

logger = get_logger(__name__)

STILL_WORKING_TEXT = "Still working on it, hang tight..."
GIVE_UP_TEXT = "Sorry, the assistant is taking too long to respond. Please try again."
ERROR_TEXT = "Sorry, something went wrong generating a reply: {reason}"

IDLE = "idle"
AWAITING = "awaiting"


class PendingResponseTracker:
    """Soft/hard deadline state machine feeding a ChatLog."""

    def __init__(
        self,
        log: ChatLog,
        soft_timeout: float = 10.0,
        hard_timeout: float = 30.0,
        still_working_text: str = STILL_WORKING_TEXT,
        give_up_text: str = GIVE_UP_TEXT,
    ):
        if hard_timeout <= soft_timeout:
            raise ValueError("hard_timeout must be greater than soft_timeout")
        self.log = log
        self.soft_timeout = soft_timeout
        self.hard_timeout = hard_timeout
        self.still_working_text = still_working_text
        self.give_up_text = give_up_text

        self.state = IDLE
        self.timeouts = 0
        self._token = 0
        self._soft: Optional[asyncio.TimerHandle] = None
        self._hard: Optional[asyncio.TimerHandle] = None

    @property
    def awaiting(self) -> bool:
        return self.state == AWAITING

    def _cancel_deadlines(self) -> None:
        for handle in (self._soft, self._hard):
            if handle is not None:
                handle.cancel()
        self._soft = None
        self._hard = None

    def start(self, text: str) -> int:
        """
        Record an outgoing message and arm both deadlines.

        Must be called from a running event loop. Any deadlines left over from
        a previous request are invalidated first.

        Returns:
            The token identifying this request.
        """
        self._cancel_deadlines()
        self._token += 1
        token = self._token

        self.log.append(text, "outgoing")
        self.state = AWAITING

        loop = asyncio.get_running_loop()
        self._soft = loop.call_later(self.soft_timeout, self._on_soft_deadline, token)
        self._hard = loop.call_later(self.hard_timeout, self._on_hard_deadline, token)
        return token

    def _on_soft_deadline(self, token: int) -> None:
        if token != self._token or self._soft is None or not self.awaiting:
            return
        self._soft = None
        logger.debug(f"Soft deadline reached for request {token}")
        self.log.append(self.still_working_text, "incoming", kind="notice")

    def _on_hard_deadline(self, token: int) -> None:
        if token != self._token or not self.awaiting:
            return
        self._cancel_deadlines()
        self.state = IDLE
        self.timeouts += 1
        logger.warning(f"Gave up waiting for a reply to request {token}")
        self.log.append(self.give_up_text, "incoming", kind="error")

    def resolve(self, text: str) -> bool:
        """
        Record an incoming reply.

        Returns:
            True if it answered the pending request, False if it arrived late
            (while idle). Late replies are still shown but arm nothing.
        """
        was_awaiting = self.awaiting
        if was_awaiting:
            self._cancel_deadlines()
            self.state = IDLE
        else:
            logger.debug("Reply arrived with no request pending")
        self.log.append(text, "incoming")
        return was_awaiting

    def fail(self, reason: str) -> bool:
        """
        Record a server-reported generation failure.

        Returns:
            True if it ended the pending request, False if nothing was pending.
        """
        was_awaiting = self.awaiting
        if was_awaiting:
            self._cancel_deadlines()
            self.state = IDLE
        self.log.append(ERROR_TEXT.format(reason=reason), "incoming", kind="error")
        return was_awaiting

    def cancel(self) -> None:
        """Drop the pending request without adding messages (teardown)."""
        self._cancel_deadlines()
        self._token += 1
        self.state = IDLE
