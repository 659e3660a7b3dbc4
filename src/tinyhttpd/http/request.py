"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Reads the request head from a connection and extracts the requested path.

=============================================================================
WHAT WE ACTUALLY NEED FROM A REQUEST
=============================================================================

A browser sends something like this:

    GET /index.html HTTP/1.1\r\n          ← request line (the only line we use)
    Host: localhost:8080\r\n              ← headers, read and discarded
    User-Agent: Mozilla/5.0 ...\r\n
    \r\n                                  ← blank line: end of the head

The server answers GET-shaped requests only, so the whole parse reduces to
"find the GET line and take the token after it":

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REQUEST LINE SHAPE                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │     G E T ␣ / i n d e x . h t m l ␣ H T T P / 1 . 1                  │
    │     └─┬─┘ │ └─────────┬─────────┘ │                                  │
    │     method│         path          └── terminator (any whitespace)    │
    │           └── one or more whitespace characters                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAIL-SAFE PARSING
=============================================================================

Malformed input never raises. Each of these yields an EMPTY path, which
downstream code answers with a 404:

    "GET"                  no path at all
    "GET /index.html"      path runs to the end of the line, no terminator
    "POST /form HTTP/1.1"  not a GET line
    <connection closed>    no request line ever arrived

The path token is matched by a regex, which is bounded by the line it is
applied to. There is no index arithmetic that could walk past the end.

=============================================================================
"""

import logging
import re
from dataclasses import dataclass
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedRequest:
    """
    The result of parsing one request.

    Attributes:
        path: The token between "GET" and the next whitespace on the first
              recognized request line, exactly as sent (no percent-decoding).
              Empty when no request line was recognized. Never None.
    """
    path: str = ""

    @property
    def is_empty(self) -> bool:
        """True when no usable request line was found."""
        return not self.path


class RequestParser:
    """
    Parses the head of an HTTP request from a binary stream.

    The stream is read one line at a time with a blocking readline() until
    the blank line that ends the head, or until end-of-stream. Lines that
    are not the request line are discarded.

    Usage:
        parser = RequestParser()
        request = parser.parse(conn.rfile)
        request.path   # "/index.html"
    """

    # =========================================================================
    # COMPILED REGEX PATTERN
    # =========================================================================
    #
    #   ^GET        - the method token at the start of the line
    #   \s+         - at least one whitespace character
    #   (\S+)       - capture: the path, up to the next whitespace
    #   \s          - the terminator MUST be present
    #
    REQUEST_LINE_PATTERN = re.compile(r"^GET\s+(\S+)\s")

    def __init__(self, max_line_size: int = 64 * 1024, encoding: str = "utf-8"):
        """
        Initialize the request parser.

        Args:
            max_line_size: Longest line read in one call. Longer lines are
                           consumed in several pieces, none of which will
                           look like a request line.
            encoding: Charset used to decode header bytes. Undecodable bytes
                      are replaced, never raised.
        """
        self.max_line_size = max_line_size
        self.encoding = encoding

    def parse(self, stream: BinaryIO) -> ParsedRequest:
        """
        Read the request head and extract the path.

        Args:
            stream: Readable binary stream positioned at the start of the
                    request (e.g. socket.makefile("rb")).

        Returns:
            ParsedRequest. The path of the FIRST recognized GET line wins;
            later GET-looking lines are ignored.

        Raises:
            OSError: If the underlying connection fails mid-read. Malformed
                     content never raises.
        """
        path = None

        while True:
            raw = stream.readline(self.max_line_size)
            if not raw:
                # End of stream before the blank line
                break

            if len(raw) >= self.max_line_size and not raw.endswith(b"\n"):
                # Over-long line: none of its pieces is a request line or
                # the blank line, so skip to its real end
                logger.debug(f"Discarding line longer than {self.max_line_size} bytes")
                if not self._skip_rest_of_line(stream):
                    break
                continue

            line = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
            logger.debug(f"Request line: ({line})")

            if not line:
                break

            if path is None:
                path = self.parse_request_line(line)

        return ParsedRequest(path=path or "")

    def _skip_rest_of_line(self, stream: BinaryIO) -> bool:
        """
        Consume the remainder of a line that did not fit in one read.

        Returns:
            True once the line terminator was consumed, False on end-of-stream.
        """
        while True:
            raw = stream.readline(self.max_line_size)
            if not raw:
                return False
            if raw.endswith(b"\n"):
                return True

    def parse_request_line(self, line: str) -> Optional[str]:
        """
        Extract the path from a single line.

        Returns:
            The path, or None if the line is not a complete GET request line.
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if match is None:
            return None
        return match.group(1)


def parse_request(stream: BinaryIO) -> ParsedRequest:
    """
    Convenience function to parse a request with default settings.
    """
    return RequestParser().parse(stream)
