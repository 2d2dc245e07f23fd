"""A TCP server that streams numbers to a single client.

The client opens the connection by sending one byte: zero asks for the
server's native byte order, anything else for the reversed order. Each
message can be followed by a one-byte acknowledgement exchange.
"""

from __future__ import annotations

import logging
import socket
import struct
import sys
from typing import Iterable

log = logging.getLogger(__name__)

SERVER_BUFF_SIZE = 64000
BACKLOG = 10
ACK_BYTE = 42

_NATIVE = "<" if sys.byteorder == "little" else ">"
_REVERSED = ">" if _NATIVE == "<" else "<"


class ServerError(Exception):
    """A socket operation of the server failed."""


class Server:
    """Listens on a TCP port and exchanges strings, bytes and numbers with one client."""

    def __init__(
        self,
        port: int,
        datagram_port: int = -1,
        use_acks: bool = True,
        verbose: bool = False,
    ) -> None:
        self.datagram_port = datagram_port
        self.use_acks = use_acks
        self.verbose = verbose
        self.reverse = False
        self.remote_address: tuple[str, int] | None = None
        self._connection: socket.socket | None = None
        self._note("Server: opening socket on port = %d", port)
        try:
            self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise ServerError(f"socket: {exc}") from exc
        try:
            self._listener.bind(("", port))
            self._listener.listen(BACKLOG)
        except OSError as exc:
            self._listener.close()
            raise ServerError(f"cannot listen on port {port}: {exc}") from exc

    @property
    def port(self) -> int:
        """The port the server listens on."""
        return self._listener.getsockname()[1]

    def _note(self, message: str, *args: object) -> None:
        if self.verbose:
            log.info(message, *args)

    def _socket(self) -> socket.socket:
        if self._connection is None:
            raise ServerError("no client is connected")
        return self._connection

    def _send(self, data: bytes) -> None:
        try:
            self._socket().sendall(data)
        except OSError as exc:
            raise ServerError(f"send: {exc}") from exc

    def _recv_some(self, limit: int) -> bytes:
        try:
            chunk = self._socket().recv(limit)
        except OSError as exc:
            raise ServerError(f"recv: {exc}") from exc
        if not chunk:
            raise ServerError("connection closed by client")
        return chunk

    def _recv_exact(self, length: int) -> bytes:
        parts = []
        remaining = length
        while remaining > 0:
            chunk = self._recv_some(min(remaining, SERVER_BUFF_SIZE))
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def _recv_ack(self) -> None:
        self._note("Waiting for ack...")
        self._recv_exact(1)
        self._note("Ack received.")

    def _send_ack(self) -> None:
        self._note("Sending ack...")
        self._send(bytes([ACK_BYTE]))

    def _after_send(self) -> None:
        if self.use_acks:
            self._recv_ack()
            self._send_ack()

    def _after_recv(self) -> None:
        if self.use_acks:
            self._send_ack()
            self._recv_ack()

    def _order(self) -> str:
        return _REVERSED if self.reverse else _NATIVE

    def connect(self) -> None:
        """Accept a client and read the byte order it asks for."""
        try:
            connection, address = self._listener.accept()
        except OSError as exc:
            raise ServerError(f"accept: {exc}") from exc
        self._connection = connection
        self.remote_address = address
        self._note("Server: got connection from %s", address[0])
        self.reverse = self._recv_exact(1)[0] != 0
        if self.reverse:
            self._note("Client requested reversed byte order.")
        else:
            self._note("Client requested normal byte order.")

    def close(self) -> None:
        """Shut down and close the connection to the client."""
        connection = self._socket()
        try:
            connection.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            raise ServerError(f"shutdown: {exc}") from exc
        finally:
            connection.close()
            self._connection = None

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._connection is not None:
            try:
                self.close()
            except ServerError:
                pass
        self._listener.close()

    def send_string(self, text: str) -> None:
        """Send the UTF-8 bytes of ``text`` with no terminator."""
        self._send(text.encode("utf-8"))
        self._note("Server: sending string '%s'", text)
        self._after_send()

    def send_bytes(self, values: bytes | Iterable[int]) -> None:
        """Send raw bytes."""
        data = bytes(values)
        self._send(data)
        self._note("Server: sending %d bytes - %s", len(data), " ".join(map(str, data)))
        self._after_send()

    def _send_numbers(self, code: str, kind: str, values: Iterable[float]) -> None:
        values = list(values)
        try:
            data = struct.pack(f"{self._order()}{len(values)}{code}", *values)
        except struct.error as exc:
            raise ValueError(f"cannot send {kind}: {exc}") from exc
        self._send(data)
        self._note("Server: sending %d %s - %s", len(values), kind, values)
        self._after_send()

    def send_ints(self, values: Iterable[int]) -> None:
        """Send 32-bit signed integers in the agreed byte order."""
        self._send_numbers("i", "ints", values)

    def send_floats(self, values: Iterable[float]) -> None:
        """Send single-precision floats in the agreed byte order."""
        self._send_numbers("f", "floats", values)

    def send_doubles(self, values: Iterable[float]) -> None:
        """Send double-precision floats in the agreed byte order."""
        self._send_numbers("d", "doubles", values)

    def recv_string(self, max_len: int, terminator: str = "\n") -> str:
        """Receive text until a chunk ends with ``terminator`` or ``max_len - 1`` bytes arrive.

        The terminator, when received, is kept in the returned text.
        """
        end = terminator.encode("utf-8")
        if len(end) != 1:
            raise ValueError("terminator must be a single byte")
        if max_len < 2:
            raise ValueError("max_len must be at least 2")
        received = bytearray()
        while True:
            chunk = self._recv_some(min(SERVER_BUFF_SIZE, max_len - 1 - len(received)))
            received += chunk
            if chunk[-1:] == end or len(received) >= max_len - 1:
                break
        text = received.decode("utf-8", errors="replace")
        self._note("Server: received '%s'", text)
        self._after_recv()
        return text

    def recv_bytes(self, length: int) -> bytes:
        """Receive exactly ``length`` raw bytes."""
        data = self._recv_exact(length)
        self._note("Server: received %d bytes - %s", len(data), " ".join(map(str, data)))
        self._after_recv()
        return data

    def _recv_numbers(self, code: str, kind: str, count: int) -> list:
        size = struct.calcsize(f"<{code}")
        data = self._recv_exact(count * size)
        values = list(struct.unpack(f"{self._order()}{count}{code}", data))
        self._note("Server: received %d %s - %s", count, kind, values)
        self._after_recv()
        return values

    def recv_ints(self, count: int) -> list[int]:
        """Receive ``count`` 32-bit signed integers."""
        return self._recv_numbers("i", "ints", count)

    def recv_floats(self, count: int) -> list[float]:
        """Receive ``count`` single-precision floats."""
        return self._recv_numbers("f", "floats", count)

    def recv_doubles(self, count: int) -> list[float]:
        """Receive ``count`` double-precision floats."""
        return self._recv_numbers("d", "doubles", count)