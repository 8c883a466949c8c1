"""
Chat client for the PratChat relay.

- connection: reconnect state machine
- pending: soft/hard reply deadlines for the in-flight request
- chat_client: WebSocket client tying both to a ChatLog
"""

from pratchat.client.chat_client import ChatClient
from pratchat.client.connection import (
    ConnectionState,
    ConnectionStateMachine,
    TransportError,
)
from pratchat.client.models import ChatLog, DisplayedMessage
from pratchat.client.pending import PendingResponseTracker

__all__ = [
    "ChatClient",
    "ChatLog",
    "ConnectionState",
    "ConnectionStateMachine",
    "DisplayedMessage",
    "PendingResponseTracker",
    "TransportError",
]
