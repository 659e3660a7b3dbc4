"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the two byte streams the request
pipeline works on, and guarantees the socket is released exactly once.

=============================================================================
ONE CONNECTION, ONE EXCHANGE
=============================================================================

This server never keeps a connection alive. Each connection walks the
same chain once and is then closed:

    ┌───────┐  parse   ┌────────┐  resolve  ┌───────────────┐
    │ START │ ───────► │ PARSED │ ────────► │ TYPE_RESOLVED │
    └───────┘          └────────┘           └───────┬───────┘
                                                    │ write head
                                                    ▼
    ┌────────┐  close  ┌──────────────┐  body  ┌────────────────┐
    │ CLOSED │ ◄────── │ BODY_WRITTEN │ ◄───── │ HEADER_WRITTEN │
    └────────┘         └──────────────┘        └────────────────┘
        ▲
        └──────── also reached from ANY state when something fails

=============================================================================
WHY STREAMS?
=============================================================================

socket.makefile() gives us buffered file objects over the socket:

    rfile.readline()   blocks until a whole line (or EOF) is available,
                       no manual recv() buffering or polling needed
    wfile.write()      buffers small writes; flush() pushes them out

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Each connection moves forward through these exactly once; there are no
    retries and no keep-alive loop.
    """
    START = "start"                    # Accepted, nothing read yet
    PARSED = "parsed"                  # Request head read, path extracted
    TYPE_RESOLVED = "type_resolved"    # Content type chosen
    HEADER_WRITTEN = "header_written"  # Status line + headers sent
    BODY_WRITTEN = "body_written"      # Body sent and flushed
    CLOSED = "closed"                  # Socket released


@dataclass
class Connection:
    """
    Represents a single client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current pipeline state.
        created_at: Timestamp when the connection was accepted.
        timeout: Socket timeout, None for fully blocking I/O.
        linger_timeout: Time allowed to drain unread data on close.
    """

    # Required parameters
    socket: socket.socket
    address: tuple = ("", 0)

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.START
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    timeout: Optional[float] = None
    linger_timeout: float = 0.5

    # Streams over the socket (created in __post_init__)
    rfile: BinaryIO = field(init=False, repr=False)
    wfile: BinaryIO = field(init=False, repr=False)

    def __post_init__(self):
        """
        Configure the socket and open the request/response streams.

        Called automatically by dataclass after __init__.
        """
        self.socket.settimeout(self.timeout)
        self.rfile = self.socket.makefile("rb")
        self.wfile = self.socket.makefile("wb")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        if isinstance(self.address, tuple) and self.address:
            return str(self.address[0])
        return str(self.address)

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    def advance(self, state: ConnectionState) -> None:
        """Move to the next pipeline state."""
        logger.debug(f"[{self.id}] {self.state.value} -> {state.value}")
        self.state = state

    # =========================================================================
    # CLOSING: Properly terminate the connection
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. flush(): push out any buffered response bytes
        2. shutdown(SHUT_WR): send FIN, the client sees end-of-body
        3. Drain: read whatever the client still sent so close()
           does not turn into a reset, for at most linger_timeout
        4. close(): release the streams and the file descriptor

        Safe to call more than once; only the first call does anything.
        """
        if self.state == ConnectionState.CLOSED:
            return  # Already closed

        try:
            self.wfile.flush()
        except OSError:
            pass  # Client already gone, nothing left to deliver

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        # linger_timeout bounds the whole drain, not each recv()
        deadline = time.monotonic() + self.linger_timeout
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    break  # Client finished sending
        except OSError:
            pass  # socket.timeout is an OSError too

        for stream in (self.wfile, self.rfile):
            try:
                stream.close()
            except OSError:
                pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER: For use with 'with' statement
    # =========================================================================

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                ...
            # Connection automatically closed here, even on error
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
