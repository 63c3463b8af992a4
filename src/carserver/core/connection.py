"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket for a single request/response cycle.

=============================================================================
ONE READ, ONE WRITE, CLOSE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      Connection Lifecycle                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED             │
    │             │                                                        │
    │             └── one recv(buffer_size)                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

TCP is a byte stream, so a single recv() may return less than the client
sent, and anything past buffer_size is never read. The service accepts
both: requests are small, and a truncated request simply fails to parse
or carries a truncated body.

The socket is fully blocking. There is no read timeout; a client that
connects and sends nothing stalls the server until it disconnects.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
import socket
import time
import uuid

from ..config import DEFAULT_BUFFER_SIZE


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request cycle."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        state: Current lifecycle state.
        buffer_size: Maximum bytes read for the request.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self):
        # Accepted sockets may inherit the listener's timeout
        self.socket.settimeout(None)

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    def read_request(self) -> bytes:
        """
        Read the request with a single bounded recv().

        Returns:
            Up to buffer_size bytes. Empty bytes mean the client closed
            the connection without sending anything.

        Raises:
            OSError: If the read fails.
        """
        self.state = ConnectionState.READING
        try:
            data = self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            # Client disconnected abruptly
            return b""
        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response.

        Returns:
            True if sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees EOF right
        after the response; the client reads until EOF since there is no
        Content-Length.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
