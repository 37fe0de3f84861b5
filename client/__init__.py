"""Stud poker client: dispatcher loop plus the transports it runs over."""

from .session import SessionStats, StudClient
from .transport import ConsoleTransport, SocketTransport, Transport, TransportError, WebSocketTransport

__all__ = [
    "SessionStats",
    "StudClient",
    "ConsoleTransport",
    "SocketTransport",
    "Transport",
    "TransportError",
    "WebSocketTransport",
]
