"""
=============================================================================
TINYHTTPD - Minimal HTTP/1.1 File Server
=============================================================================

Serves files from a document root over raw sockets, one request per
connection, one worker thread per connection.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyhttpd)
    ├── server.py            # HTTPServer facade
    ├── worker.py            # ConnectionHandler: the per-connection pipeline
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── connection.py    # Connection: socket + streams + state
    │   └── socket_server.py # TCP listener, thread per connection
    ├── http/
    │   ├── request.py       # Request line parsing
    │   ├── mime_types.py    # Content type resolution
    │   ├── paths.py         # Status-check path vs content path
    │   ├── response.py      # Response head writer
    │   └── status_codes.py  # 200 / 404
    └── handlers/
        └── content.py       # Body rendering (placeholder, template,
                             #   binary, 404)

=============================================================================
QUICK START
=============================================================================

    from tinyhttpd import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
    server.run()

    # or from a shell:
    python -m tinyhttpd --port 8080 --root ./www

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .worker import ConnectionHandler

__all__ = ["HTTPServer", "ServerConfig", "ConnectionHandler", "__version__"]
