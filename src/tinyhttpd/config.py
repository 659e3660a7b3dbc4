"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m tinyhttpd --port 3000                            │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=3000 python -m tinyhttpd                         │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SHARED, READ-ONLY
=============================================================================

One ServerConfig is built at startup and read by every connection worker.
Nothing mutates it after the server starts, so workers need no locking to
read the server identity or the document root.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout, linger_timeout

    CONTENT SETTINGS
    - document_root, encoding

    SERVER IDENTITY
    - server_name, template_timezone

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    timeout: Optional[float] = None
    """
    Socket timeout for accepted connections, in seconds.
    None = fully blocking: a silent client holds its worker indefinitely.
    """

    linger_timeout: float = 0.5
    """
    How long close() waits while draining unread client data.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = field(default_factory=os.getcwd)
    """
    Prefix joined to the request path when reading the body.
    Defaults to the process working directory at startup.
    """

    encoding: str = "utf-8"
    """
    Charset of templated text files.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "TinyHTTPd/1.0"
    """
    Sent in the Server header and substituted for {{cs371server}}.
    """

    template_timezone: str = "America/Denver"
    """
    IANA zone used to render {{cs371date}}. The Date header is always GMT.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG shows every request line and state transition.
    """

    @property
    def template_tz(self) -> ZoneInfo:
        """The template time zone as a tzinfo object."""
        return ZoneInfo(self.template_timezone)

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST           Server host (default: 127.0.0.1)
        HTTP_PORT           Server port (default: 8080)
        HTTP_TIMEOUT        Connection timeout in seconds (default: none)
        HTTP_DOCUMENT_ROOT  Content root (default: working directory)
        HTTP_SERVER_NAME    Server identity (default: TinyHTTPd/1.0)
        HTTP_TEMPLATE_TZ    Template time zone (default: America/Denver)
        HTTP_LOG_LEVEL      Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            timeout=float(timeout) if timeout else None,
            document_root=os.getenv("HTTP_DOCUMENT_ROOT") or os.getcwd(),
            server_name=os.getenv("HTTP_SERVER_NAME", "TinyHTTPd/1.0"),
            template_timezone=os.getenv("HTTP_TEMPLATE_TZ", "America/Denver"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails immediately, not on the
        first request.

        Raises:
            ValueError: Describing the first invalid setting found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.linger_timeout < 0:
            raise ValueError("linger_timeout must be >= 0")

        if not os.path.isdir(self.document_root):
            raise ValueError(f"Document root is not a directory: {self.document_root}")

        if not self.server_name:
            raise ValueError("server_name must not be empty")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        try:
            self.template_tz
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {self.template_timezone}") from e
