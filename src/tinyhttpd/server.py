"""
=============================================================================
FILE SERVER
=============================================================================

The entry point that ties the listener to the request pipeline.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         HTTPServer                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ServerConfig ──► validate()                                        │
    │        │                                                             │
    │        ├──► SocketServer        accept loop, thread per connection   │
    │        │                                                             │
    │        └──► ConnectionHandler   parse → type → head → body → close   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
USAGE
=============================================================================

    from tinyhttpd import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
    server.run()    # blocks until Ctrl+C / SIGTERM

=============================================================================
"""

import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer
from .worker import ConnectionHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-request-per-connection HTTP file server.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._handler = ConnectionHandler(self.config)

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """The bound (host, port) while running, else None."""
        return self._socket_server.bound_address

    def run(self, configure_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Install a root log handler at the configured
                               level. Pass False when the host application
                               already configured logging.

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        if configure_logging:
            self._setup_logging()

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}, "
            f"serving {self.config.document_root}"
        )

        try:
            self._socket_server.start(self._handler.handle)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Safe to call from another thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening (or timeout)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_number

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyhttpd").setLevel(level)
