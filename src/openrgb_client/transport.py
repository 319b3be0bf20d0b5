"""
Stream transport for the OpenRGB SDK session.

The ``StreamTransport`` ABC abstracts the byte stream so that:
  • Tests can inject a mock or in-memory transport (no server needed).
  • ``TcpTransport`` provides the real socket connection.

A transport only moves bytes.  Framing lives in ``packets`` and request
sequencing lives in ``session``.
"""
from __future__ import annotations

import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional

from .errors import TransportError

log = logging.getLogger(__name__)

# Default OpenRGB SDK server port
DEFAULT_PORT = 6742

# Upper bound for a single recv; frame lengths come off the wire
RECV_CHUNK = 65536


# =========================================================================
# Abstract stream transport
# =========================================================================

class StreamTransport(ABC):
    """Abstract bidirectional byte stream, mockable for testing."""

    @abstractmethod
    def open(self) -> None:
        """Open the underlying connection."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection. Safe to call twice."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Queue data for sending. Nothing is guaranteed sent before flush()."""

    @abstractmethod
    def flush(self) -> None:
        """Send everything queued by write() as one unit."""

    @abstractmethod
    def read_exact(self, n: int) -> bytes:
        """Block until exactly n bytes arrive.

        Raises:
            TransportError: If the stream ends or fails first.
        """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the stream is currently open."""

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()


# =========================================================================
# Real transport: TCP socket
# =========================================================================

class TcpTransport(StreamTransport):
    """TCP connection to an OpenRGB SDK server.

    Writes accumulate in a local buffer and go out in a single
    ``sendall`` on flush(), so a header and its body are never split by
    another writer's bytes.

    ``timeout`` is handed to the socket as-is; None blocks forever.
    """

    def __init__(self, host: str = '127.0.0.1', port: int = DEFAULT_PORT,
                 timeout: Optional[float] = None):
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: Optional[socket.socket] = None
        self._pending = bytearray()

    @property
    def address(self) -> tuple:
        return (self._host, self._port)

    def open(self) -> None:
        if self._sock is not None:
            return
        try:
            self._sock = socket.create_connection(self.address, timeout=self._timeout)
        except OSError as e:
            raise TransportError(f"connect to {self._host}:{self._port} failed: {e}") from e
        self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        log.debug("Connected to %s:%d", self._host, self._port)

    def close(self) -> None:
        self._pending.clear()
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as e:
                log.debug("Error closing socket: %s", e)
            self._sock = None
            log.debug("Closed connection to %s:%d", self._host, self._port)

    def _require_open(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("Transport not open")
        return self._sock

    def write(self, data: bytes) -> None:
        self._require_open()
        self._pending += data

    def flush(self) -> None:
        sock = self._require_open()
        if not self._pending:
            return
        data = bytes(self._pending)
        self._pending.clear()
        try:
            sock.sendall(data)
        except OSError as e:
            raise TransportError(f"send failed: {e}") from e

    def read_exact(self, n: int) -> bytes:
        sock = self._require_open()
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = sock.recv(min(n - len(buf), RECV_CHUNK))
            except OSError as e:
                raise TransportError(f"receive failed: {e}") from e
            if not chunk:
                raise TransportError(
                    f"connection closed by peer after {len(buf)} of {n} bytes"
                )
            buf += chunk
        return bytes(buf)

    @property
    def is_open(self) -> bool:
        return self._sock is not None
