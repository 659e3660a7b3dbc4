"""
HTTP protocol pieces: request parsing, content typing, path resolution,
status codes and the response head.
"""

from .mime_types import MimeType, resolve_content_type
from .paths import status_check_path, content_path, path_exists
from .request import ParsedRequest, RequestParser, parse_request
from .response import ResponseHeaderWriter, format_http_date
from .status_codes import HTTPStatus

__all__ = [
    "MimeType",
    "resolve_content_type",
    "status_check_path",
    "content_path",
    "path_exists",
    "ParsedRequest",
    "RequestParser",
    "parse_request",
    "ResponseHeaderWriter",
    "format_http_date",
    "HTTPStatus",
]
