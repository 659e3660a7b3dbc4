"""
=============================================================================
CONTENT TYPE RESOLUTION
=============================================================================

Classifies a requested path into one of the five MIME types this server
knows how to serve.

=============================================================================
HOW CLASSIFICATION WORKS
=============================================================================

The resolver does NOT look up a real file extension. It scans the whole
lowercased path for a marker and returns the first rule that hits:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  Priority │ Marker (substring)  │ MIME type                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │     1     │ .gif                │ image/gif                         │
    │     2     │ .jpeg               │ image/jpeg                        │
    │     3     │ .png                │ image/png                         │
    │     4     │ ico                 │ image/x-icon                      │
    │     -     │ (anything else)     │ text/html                         │
    └─────────────────────────────────────────────────────────────────────┘

Rule 4 matches "ico" ANYWHERE in the path, so "/favicon.ico" and
"/musicology.html" are both image/x-icon. That is the observable contract
of this server and changing it would reclassify existing URLs.

    >>> resolve_content_type("/images/Logo.PNG")
    <MimeType.PNG: 'image/png'>
    >>> resolve_content_type("/docs/index.html")
    <MimeType.HTML: 'text/html'>

=============================================================================
"""

from enum import Enum


class MimeType(str, Enum):
    """
    The closed set of content types produced by the resolver.

    Inherits from str so a member can be written straight into a
    Content-Type header.
    """
    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"
    ICON = "image/x-icon"
    HTML = "text/html"

    @property
    def is_image(self) -> bool:
        """True for every image/* member."""
        return self.value.startswith("image/")

    def __str__(self) -> str:
        return self.value


# =============================================================================
# CLASSIFICATION RULES
# =============================================================================
#
# Order matters: the first marker found in the path wins.
#
CONTENT_TYPE_RULES = (
    (".gif", MimeType.GIF),
    (".jpeg", MimeType.JPEG),
    (".png", MimeType.PNG),
    ("ico", MimeType.ICON),       # substring, not an extension
)

DEFAULT_CONTENT_TYPE = MimeType.HTML


def resolve_content_type(path: str) -> MimeType:
    """
    Get the MIME type for a requested path.

    Comparison is case-insensitive. An empty path is text/html.

    Args:
        path: The raw request path as parsed from the request line.

    Returns:
        The first matching MimeType, or text/html.
    """
    lowered = path.lower()
    for marker, mime_type in CONTENT_TYPE_RULES:
        if marker in lowered:
            return mime_type
    return DEFAULT_CONTENT_TYPE
