"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Runs the request pipeline for one connection, on that connection's own
worker thread.

=============================================================================
PIPELINE
=============================================================================

    ┌──────────────────────────────────────────────────────────────────────┐
    │                   ConnectionHandler.handle(conn)                     │
    ├──────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. RequestParser.parse(rfile)       → path      PARSED             │
    │   2. resolve_content_type(path)       → MimeType  TYPE_RESOLVED      │
    │   3. ResponseHeaderWriter.write(...)  → exists?   HEADER_WRITTEN     │
    │   4. BodyRenderer.render(..., exists)                                │
    │   5. wfile.flush()                                BODY_WRITTEN       │
    │   6. conn.close()   ← ALWAYS, success or failure  CLOSED             │
    │                                                                      │
    └──────────────────────────────────────────────────────────────────────┘

The head is always written before the body, and the body never starts
until the head writer has returned its existence outcome.

=============================================================================
FAILURES
=============================================================================

Nothing escapes handle(). Malformed requests and missing files are not
failures at all: they degrade to 404-shaped responses further down. What
remains is an I/O error on the socket itself (client hung up, timeout),
which is logged and ends the exchange. Once the head has started going
out, no second response is attempted.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core.connection import Connection, ConnectionState
from .handlers.content import BodyRenderer
from .http.mime_types import resolve_content_type
from .http.request import RequestParser
from .http.response import ResponseHeaderWriter
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("tinyhttpd.access")


class ConnectionHandler:
    """
    Orchestrates parse → resolve → head → body → close for one connection.

    A single instance is shared by all worker threads. It holds only
    read-only collaborators, so concurrent calls to handle() need no locking.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        parser: Optional[RequestParser] = None,
        header_writer: Optional[ResponseHeaderWriter] = None,
        body_renderer: Optional[BodyRenderer] = None,
    ):
        self.config = config or ServerConfig()
        self.parser = parser or RequestParser(encoding=self.config.encoding)
        self.header_writer = header_writer or ResponseHeaderWriter(self.config.server_name)
        self.body_renderer = body_renderer or BodyRenderer(
            document_root=self.config.document_root,
            server_name=self.config.server_name,
            template_tz=self.config.template_tz,
            encoding=self.config.encoding,
        )

    def handle(self, conn: Connection) -> None:
        """
        Serve exactly one request on conn, then close it.

        Args:
            conn: A freshly accepted connection in the START state.
        """
        logger.debug(f"[{conn.id}] Handling connection from {conn.client_ip}")

        with conn:  # Context manager ensures connection is closed
            try:
                self._process(conn)
            except OSError as e:
                # Stream failure: the client went away or the socket timed out
                logger.warning(f"[{conn.id}] Stream error in state {conn.state.value}: {e}")
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")

        logger.debug(f"[{conn.id}] Done handling connection")

    def _process(self, conn: Connection) -> None:
        request = self.parser.parse(conn.rfile)
        conn.advance(ConnectionState.PARSED)

        content_type = resolve_content_type(request.path)
        logger.debug(f"[{conn.id}] Content type for {request.path!r}: {content_type}")
        conn.advance(ConnectionState.TYPE_RESOLVED)

        exists = self.header_writer.write(conn.wfile, content_type, request.path)
        conn.advance(ConnectionState.HEADER_WRITTEN)

        self.body_renderer.render(conn.wfile, content_type, request.path, exists)
        conn.wfile.flush()
        conn.advance(ConnectionState.BODY_WRITTEN)

        status = HTTPStatus.from_existence(exists)
        access_logger.info(
            f'{conn.client_ip} "GET {request.path}" {status.value} {content_type}'
        )
