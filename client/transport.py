"""Byte streams the client session reads commands from and writes replies to."""

from __future__ import annotations

import logging
import socket
import sys
from typing import Optional, TextIO

import websockets
from websockets.sync.client import ClientConnection, connect

from stud.protocol import FRAME_HEADER, decode_payload, encode_frame

LOGGER = logging.getLogger("stud_client")


class TransportError(ConnectionError):
    """Raised when the underlying stream cannot be read, written or opened."""


class Transport:
    """Blocking line transport; closes itself when used as a context manager."""

    closed = False

    def read(self) -> str:
        raise NotImplementedError

    def write(self, line: str) -> None:
        raise NotImplementedError

    def _release(self) -> None:
        pass

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._release()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SocketTransport(Transport):
    """TCP stream carrying length-prefixed UTF-8 frames."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    @classmethod
    def connect(cls, host: str, port: int, timeout: Optional[float] = None) -> "SocketTransport":
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as exc:
            raise TransportError(f"Cannot connect to {host}:{port}: {exc}") from exc
        LOGGER.info("[connect] %s:%s", host, port)
        return cls(sock)

    def read(self) -> str:
        header = self._read_exactly(FRAME_HEADER.size)
        (length,) = FRAME_HEADER.unpack(header)
        payload = self._read_exactly(length)
        try:
            return decode_payload(payload)
        except UnicodeDecodeError as exc:
            raise TransportError(f"Frame is not valid UTF-8: {exc}") from exc

    def write(self, line: str) -> None:
        try:
            frame = encode_frame(line)
        except ValueError as exc:
            raise TransportError(str(exc)) from exc
        try:
            self.sock.sendall(frame)
        except OSError as exc:
            raise TransportError(f"Write failed: {exc}") from exc

    def _read_exactly(self, count: int) -> bytes:
        chunks = []
        remaining = count
        while remaining:
            try:
                chunk = self.sock.recv(remaining)
            except OSError as exc:
                raise TransportError(f"Read failed: {exc}") from exc
            if not chunk:
                raise TransportError("Connection closed by dealer")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _release(self) -> None:
        self.sock.close()


class WebSocketTransport(Transport):
    """One text message per protocol line."""

    def __init__(self, connection: ClientConnection) -> None:
        self.connection = connection

    @classmethod
    def connect(cls, url: str) -> "WebSocketTransport":
        try:
            connection = connect(url)
        except (OSError, websockets.exceptions.WebSocketException) as exc:
            raise TransportError(f"Cannot connect to {url}: {exc}") from exc
        LOGGER.info("[connect] %s", url)
        return cls(connection)

    def read(self) -> str:
        try:
            message = self.connection.recv()
        except websockets.exceptions.ConnectionClosed as exc:
            raise TransportError(f"Connection closed by dealer: {exc}") from exc
        if isinstance(message, bytes):
            try:
                return message.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise TransportError(f"Message is not valid UTF-8: {exc}") from exc
        return message

    def write(self, line: str) -> None:
        try:
            self.connection.send(line)
        except (OSError, websockets.exceptions.ConnectionClosed) as exc:
            raise TransportError(f"Write failed: {exc}") from exc

    def _release(self) -> None:
        self.connection.close()


class ConsoleTransport(Transport):
    """Stand-in dealer driven by hand from a terminal."""

    PROMPT = "Enter server command: "

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def read(self) -> str:
        self.stdout.write(self.PROMPT)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise TransportError("Console input closed")
        return line.rstrip("\r\n")

    def write(self, line: str) -> None:
        self.stdout.write(f"Client sent: {line}\n")
        self.stdout.flush()
