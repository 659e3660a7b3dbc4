"""
=============================================================================
RESPONSE BODY RENDERING
=============================================================================

Produces the response body once the head has been written.

=============================================================================
DISPATCH TABLE
=============================================================================

The renderer branches on two inputs: the resolved content type and the
existence outcome reported by the header writer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Content type │ Exists? │ Body                                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │ text/html    │ yes     │ PLACEHOLDER_PAGE (file is never opened)    │
    │ text/html    │ no      │ <root><path> as a template, line by line   │
    │              │         │   └── open fails → NOT_FOUND_PAGE          │
    │ image/*      │ either  │ <root><path> as raw bytes                  │
    │              │         │   └── open fails → NOT_FOUND_PAGE          │
    └─────────────────────────────────────────────────────────────────────┘

Two things here look wrong and are not:

1. A 200 for text/html always serves the placeholder, whatever the real
   file contains.
2. A missing image gets the HTML 404 snippet even though the head already
   said Content-Type: image/...

Both are what clients of this server observe, so both are kept.

=============================================================================
TEMPLATES
=============================================================================

Text files are streamed one line at a time. Two tokens are substituted:

    {{cs371date}}    → current time in the reference time zone
    {{cs371server}}  → the server identity string

Every emitted line ends with exactly one "\\n", whatever terminator the
source line had (\\n, \\r\\n, \\r, or none on the last line).

=============================================================================
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import BinaryIO, Callable, Optional

from ..http.mime_types import MimeType
from ..http.paths import content_path


logger = logging.getLogger(__name__)


# =============================================================================
# FIXED PAYLOADS
# =============================================================================

PLACEHOLDER_PAGE = (
    b"<html><head></head><body>\n"
    b"<h3>My web server works!</h3>\n"
    b"</body></html>\n"
)

NOT_FOUND_PAGE = (
    b"<html>\n"
    b"<head>\n<title>ERROR 404</title></head>\n"
    b"<body>\n"
    b"<h1>404 Not Found</h1>\n"
    b"</body>\n"
    b"</html>\n"
)

DATE_TOKEN = "{{cs371date}}"
SERVER_TOKEN = "{{cs371server}}"

TEMPLATE_DATE_FORMAT = "%b %d, %Y %I:%M:%S %p %Z"


@dataclass(frozen=True)
class TemplateContext:
    """
    Values substituted into templated text files.

    Built once per request, so every line of one response shows the same
    timestamp.
    """
    timestamp: datetime
    server_name: str

    @classmethod
    def now(cls, server_name: str, tz: tzinfo) -> "TemplateContext":
        """Create a context stamped with the current time in tz."""
        return cls(timestamp=datetime.now(tz), server_name=server_name)

    @property
    def formatted_date(self) -> str:
        """The timestamp in TEMPLATE_DATE_FORMAT, e.g. "Oct 19, 2026 05:44:00 AM MDT", in its own zone."""
        return self.timestamp.strftime(TEMPLATE_DATE_FORMAT)

    def substitute(self, line: str) -> str:
        """Replace every recognized token in a single line."""
        if DATE_TOKEN in line:
            line = line.replace(DATE_TOKEN, self.formatted_date)
        if SERVER_TOKEN in line:
            line = line.replace(SERVER_TOKEN, self.server_name)
        return line


class BodyRenderer:
    """
    Writes the response body for one request.

    =========================================================================
    RESOURCE HANDLING
    =========================================================================

    Only the open() of the content file is guarded. A failed open is the
    "resource not found" case and is answered with NOT_FOUND_PAGE. Errors
    while writing to the client are NOT caught here; they propagate to the
    connection handler, which logs them and closes the connection.

    Every file handle is opened in a with block and released on every exit
    path.

    =========================================================================
    USAGE
    =========================================================================

        renderer = BodyRenderer(
            document_root=os.getcwd(),
            server_name="TinyHTTPd/1.0",
            template_tz=ZoneInfo("America/Denver"),
        )
        renderer.render(conn.wfile, MimeType.HTML, "/index.html", exists=False)

    =========================================================================
    """

    def __init__(
        self,
        document_root: str,
        server_name: str,
        template_tz: tzinfo,
        encoding: str = "utf-8",
        context_factory: Optional[Callable[[], TemplateContext]] = None,
    ):
        """
        Args:
            document_root: Prefix for content paths (the working directory).
            server_name: Identity substituted for the server token.
            template_tz: Reference time zone for the date token.
            encoding: Charset of templated text files.
            context_factory: Builds the TemplateContext for a request.
                             Defaults to "now" in template_tz.
        """
        self.document_root = document_root
        self.server_name = server_name
        self.template_tz = template_tz
        self.encoding = encoding
        self.context_factory = context_factory or (
            lambda: TemplateContext.now(self.server_name, self.template_tz)
        )

    def render(self, stream: BinaryIO, content_type: MimeType, path: str, exists: bool) -> None:
        """
        Write the body for a request.

        Args:
            stream: Writable binary stream for the connection.
            content_type: Type chosen by the resolver.
            path: Raw request path, as parsed.
            exists: Outcome of the header writer's existence check.

        Raises:
            OSError: If writing to the connection fails.
        """
        logger.debug(f"Rendering body: path={path!r} type={content_type} exists={exists}")

        if content_type.is_image:
            self.render_binary(stream, path)
        elif exists:
            self.render_placeholder(stream)
        else:
            self.render_template(stream, path)

    def render_placeholder(self, stream: BinaryIO) -> None:
        """Write the fixed success page."""
        stream.write(PLACEHOLDER_PAGE)

    def render_not_found(self, stream: BinaryIO) -> None:
        """Write the fixed 404 snippet."""
        stream.write(NOT_FOUND_PAGE)

    def render_template(self, stream: BinaryIO, path: str) -> None:
        """
        Stream a text file from the document root with token substitution.

        Falls back to the 404 snippet if the file cannot be opened.
        """
        full_path = content_path(self.document_root, path)
        try:
            source = open(full_path, "r", encoding=self.encoding, errors="replace")
        except (OSError, ValueError) as e:
            # ValueError: the path holds a NUL byte
            logger.info(f"File not found: {full_path!r} ({e.__class__.__name__})")
            self.render_not_found(stream)
            return

        context = self.context_factory()
        with source:
            # Universal newlines: \r\n and \r arrive here as \n
            for line in source:
                line = context.substitute(line.rstrip("\n"))
                stream.write(line.encode(self.encoding))
                stream.write(b"\n")

    def render_binary(self, stream: BinaryIO, path: str) -> None:
        """
        Copy a file from the document root verbatim.

        Falls back to the (HTML) 404 snippet if the file cannot be opened.
        """
        full_path = content_path(self.document_root, path)
        try:
            source = open(full_path, "rb")
        except (OSError, ValueError) as e:
            # ValueError: the path holds a NUL byte
            logger.info(f"File not found: {full_path!r} ({e.__class__.__name__})")
            self.render_not_found(stream)
            return

        with source:
            stream.write(source.read())
