"""
WebSocket chat client for the PratChat relay.

Connects to /ws/chat, mirrors the conversation into a ChatLog for display,
reconnects with linear backoff, and applies the soft/hard reply deadlines.

Usage:
    client = ChatClient("http://localhost:3000", on_message=print)
    asyncio.create_task(client.run())
    await client.send("hello")
    ...
    await client.close()
"""

import asyncio
import json
from typing import Any, Callable, Optional

import httpx
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from pratchat.client.connection import (
    ConnectionState,
    ConnectionStateMachine,
    TransportError,
)
from pratchat.client.models import ChatLog, DisplayedMessage
from pratchat.client.pending import PendingResponseTracker
from pratchat.config import CONFIG
from pratchat.logger import get_logger
from pratchat.session.models import (
    ASSISTANT_ERROR,
    ASSISTANT_REPLY,
    PROTOCOL_ERROR,
    SESSION_STARTED,
    UserMessage,
)

logger = get_logger(__name__)

WS_PATH = "/ws/chat"
GREETING_PATH = "/api/hello"
GAVE_UP_TEXT = "Lost connection to the chat server. Reconnect to continue."
NOT_DELIVERED_TEXT = "Your message could not be delivered: the connection was closed."

_TRANSPORT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    WebSocketException,
)


def to_ws_url(server_url: str) -> str:
    """http(s)://host:port -> ws(s)://host:port/ws/chat"""
    url = server_url.rstrip("/")
    if url.startswith("https://"):
        url = "wss://" + url[len("https://"):]
    elif url.startswith("http://"):
        url = "ws://" + url[len("http://"):]
    if not url.endswith(WS_PATH):
        url += WS_PATH
    return url


class ChatClient:
    """Client side of a chat session.

    Args:
        server_url: Base HTTP URL of the relay (defaults to CONFIG.server_url).
        soft_timeout: Seconds before the "still working" notice.
        hard_timeout: Seconds before giving up on a reply.
        max_reconnect_attempts: Retries allowed after a lost connection.
        reconnect_delay: Base delay; attempt n waits n * reconnect_delay.
        reconnect_delay_max: Cap on a single retry delay.
        on_message: Called with every DisplayedMessage appended to the log.
        on_state_change: Called with (old, new) ConnectionState values.
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        soft_timeout: Optional[float] = None,
        hard_timeout: Optional[float] = None,
        max_reconnect_attempts: Optional[int] = None,
        reconnect_delay: Optional[float] = None,
        reconnect_delay_max: Optional[float] = None,
        on_message: Optional[Callable[[DisplayedMessage], None]] = None,
        on_state_change: Optional[
            Callable[[ConnectionState, ConnectionState], None]
        ] = None,
    ):
        self.server_url = (server_url or CONFIG.server_url).rstrip("/")
        self.ws_url = to_ws_url(self.server_url)
        self.session_id: str | None = None
        self._ws = None

        self.log = ChatLog(on_append=on_message)
        self.pending = PendingResponseTracker(
            self.log,
            soft_timeout=(
                soft_timeout if soft_timeout is not None else CONFIG.soft_timeout
            ),
            hard_timeout=(
                hard_timeout if hard_timeout is not None else CONFIG.hard_timeout
            ),
        )
        self.connection = ConnectionStateMachine(
            max_attempts=(
                max_reconnect_attempts
                if max_reconnect_attempts is not None
                else CONFIG.max_reconnect_attempts
            ),
            base_delay=(
                reconnect_delay
                if reconnect_delay is not None
                else CONFIG.reconnect_delay
            ),
            max_delay=(
                reconnect_delay_max
                if reconnect_delay_max is not None
                else CONFIG.reconnect_delay_max
            ),
            on_change=on_state_change,
        )

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def connected(self) -> bool:
        return self._ws is not None and self.state == ConnectionState.CONNECTED

    async def fetch_greeting(self) -> str | None:
        """Fetch /api/hello and show it as the first incoming message."""
        url = f"{self.server_url}{GREETING_PATH}"
        try:
            async with httpx.AsyncClient(timeout=10.0) as http:
                resp = await http.get(url)
                resp.raise_for_status()
                greeting = resp.json().get("message")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not fetch greeting from {url}: {e}")
            return None

        if greeting:
            self.log.append(greeting, "incoming")
        return greeting

    def handle_event(self, data: dict[str, Any]) -> None:
        """Apply one server event to the pending request and the log."""
        msg_type = data.get("type")

        if msg_type == ASSISTANT_REPLY:
            if not self.pending.resolve(data.get("text", "")):
                logger.info("Late reply received after the request was resolved")

        elif msg_type == ASSISTANT_ERROR:
            reason = data.get("reason") or "unknown error"
            logger.warning(f"Server reported a generation failure: {reason}")
            self.pending.fail(reason)

        elif msg_type == SESSION_STARTED:
            self.session_id = data.get("session_id")
            logger.info(f"Session started: {self.session_id}")

        elif msg_type == PROTOCOL_ERROR:
            logger.warning(f"Server rejected a frame: {data.get('message')}")

        else:
            logger.debug(f"Unhandled message type: {msg_type}")

    async def run_once(self) -> None:
        """Connect and run the receive loop until the socket closes."""
        logger.info(f"Connecting to {self.ws_url} ...")

        async with websockets.connect(self.ws_url) as ws:
            if not self.connection.mark_connected():
                # Torn down while the handshake was in flight
                await ws.close()
                return
            self._ws = ws
            logger.info("Connected to server")
            try:
                async for message in ws:
                    try:
                        data = json.loads(message)
                    except json.JSONDecodeError:
                        logger.warning("Ignoring non-JSON frame from server")
                        continue
                    if isinstance(data, dict):
                        self.handle_event(data)
            finally:
                self._ws = None

    async def run(self) -> None:
        """Run with automatic reconnection until closed or out of attempts."""
        self.connection.begin_connect()

        while self.connection.should_run:
            try:
                await self.run_once()
                logger.info("Disconnected from server")
            except _TRANSPORT_ERRORS as e:
                logger.warning(f"Connection failed: {e}")

            if not self.connection.should_run:
                break

            delay = self.connection.next_retry_delay()
            if delay is None:
                if self.connection.exhausted:
                    self.log.append(GAVE_UP_TEXT, "incoming", kind="error")
                break

            logger.info(
                f"Reconnecting in {delay:.1f}s "
                f"(attempt {self.connection.attempts}/{self.connection.max_attempts})"
            )
            await asyncio.sleep(delay)

    async def send(self, text: str) -> bool:
        """
        Send one user message.

        Surrounding whitespace is trimmed and blank input is ignored.

        Returns:
            True if a message was sent, False for blank input.

        Raises:
            TransportError: If the client is not connected.
        """
        text = text.strip()
        if not text:
            return False

        ws = self._ws
        if ws is None or self.state != ConnectionState.CONNECTED:
            raise TransportError("Not connected to the chat server")

        self.pending.start(text)
        try:
            await ws.send(json.dumps(UserMessage(text=text).model_dump()))
        except ConnectionClosed as e:
            self.pending.cancel()
            self.log.append(NOT_DELIVERED_TEXT, "incoming", kind="error")
            raise TransportError(f"Connection closed while sending: {e}") from e
        return True

    async def close(self) -> None:
        """Tear down for good. Calling it again does nothing."""
        if not self.connection.teardown():
            return
        self.pending.cancel()
        ws = self._ws
        self._ws = None
        if ws is not None:
            await ws.close()
        logger.info("Chat client closed")
