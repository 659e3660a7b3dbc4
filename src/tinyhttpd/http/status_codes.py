"""
HTTP status codes emitted by the server.

Only two outcomes exist: the existence check either succeeds (200) or it
does not (404). The enum keeps the reason phrases next to the codes so the
status line is never assembled from loose strings.
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # Existence check succeeded
    NOT_FOUND = 404     # Existence check failed

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _PHRASES[self]

    @classmethod
    def from_existence(cls, exists: bool) -> "HTTPStatus":
        """Map an existence outcome to its status code."""
        return cls.OK if exists else cls.NOT_FOUND


_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
