"""
=============================================================================
HTTP RESPONSE HEADER
=============================================================================

Writes the status line and the fixed header block of every response.

=============================================================================
RESPONSE HEAD FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                       ← status line (200 or 404)
    Date: Mon, 19 Oct 2026 11:44:00 GMT\r\n   ← always GMT (RFC 7231)
    Server: TinyHTTPd/1.0\r\n                 ← fixed server identity
    Connection: close\r\n                     ← one exchange per connection
    Content-Type: text/html\r\n               ← from the content type resolver
    \r\n                                      ← end of head, body follows

There is NO Content-Length header. The body is streamed as it is produced
and its length is never computed up front; the client reads until the
server closes the connection.

=============================================================================
WHERE DOES THE STATUS COME FROM?
=============================================================================

The status is decided by a filesystem existence check on the RAW request
path (see http/paths.py), not on the file the body will be read from. The
outcome is returned to the caller so the body renderer can branch on it.

=============================================================================
"""

import logging
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Optional

from .paths import status_check_path, path_exists
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


HTTP_VERSION = "HTTP/1.1"


class ResponseHeaderWriter:
    """
    Emits the response head and reports the existence outcome.

    Usage:
        writer = ResponseHeaderWriter(server_name="TinyHTTPd/1.0")
        exists = writer.write(conn.wfile, MimeType.HTML, "/index.html")
    """

    def __init__(
        self,
        server_name: str,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            server_name: Value of the Server header.
            clock: Returns the current time. Defaults to UTC now; tests can
                   pin it.
        """
        self.server_name = server_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def check_exists(self, path: str) -> bool:
        """Existence check on the raw request path."""
        return path_exists(status_check_path(path))

    def build(self, status: HTTPStatus, content_type: str) -> bytes:
        """
        Build the response head bytes.

        Args:
            status: 200 or 404.
            content_type: Resolved MIME type.

        Returns:
            The status line, headers and terminating blank line.
        """
        lines = [
            f"{HTTP_VERSION} {status.value} {status.phrase}",
            f"Date: {format_http_date(self.clock())}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {content_type}",
        ]
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1", errors="replace")

    def write(self, stream: BinaryIO, content_type: str, path: str) -> bool:
        """
        Check existence, then write the head to the client.

        Args:
            stream: Writable binary stream for the connection.
            content_type: Resolved MIME type.
            path: Raw request path, as parsed.

        Returns:
            The existence outcome (True = 200 was sent).

        Raises:
            OSError: If writing to the connection fails.
        """
        exists = self.check_exists(path)
        status = HTTPStatus.from_existence(exists)

        if not exists:
            logger.info(f"File not found: {path!r}")

        stream.write(self.build(status, str(content_type)))
        return exists


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Mon, 19 Oct 2026 11:44:00 GMT

    HTTP dates are ALWAYS in GMT. Aware datetimes are converted to UTC
    first; naive ones are assumed to already be UTC.

    Args:
        dt: Datetime to format.

    Returns:
        Formatted date string.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    # Weekday names (0=Monday in Python's datetime)
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    # Month names (1-indexed, so we subtract 1)
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
