"""
Unit tests for request line parsing.
"""

import io

import pytest

from tinyhttpd.http.request import (
    ParsedRequest,
    RequestParser,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a browser-style GET request."""
        request = RequestParser().parse(io.BytesIO(sample_get_request))

        assert request == ParsedRequest(path="/index.html")
        assert request.is_empty is False

    def test_stops_at_blank_line(self):
        """Lines after the end of the head are left unread."""
        stream = io.BytesIO(b"GET /a.html HTTP/1.1\r\n\r\nGET /b.html HTTP/1.1\r\n")
        request = parse_request(stream)

        assert request.path == "/a.html"
        assert stream.read() == b"GET /b.html HTTP/1.1\r\n"

    def test_reads_to_end_of_stream(self):
        """A head with no blank line ends at EOF."""
        request = parse_request(io.BytesIO(b"GET /x.png HTTP/1.1\r\nHost: test\r\n"))
        assert request.path == "/x.png"

    def test_bare_newlines(self):
        """LF-only line endings are accepted."""
        request = parse_request(io.BytesIO(b"GET /lf.html HTTP/1.0\nHost: test\n\n"))
        assert request.path == "/lf.html"

    def test_path_is_not_decoded(self):
        """The path is passed through exactly as sent."""
        request = parse_request(io.BytesIO(b"GET /my%20file.html?x=1 HTTP/1.1\r\n\r\n"))
        assert request.path == "/my%20file.html?x=1"

    def test_first_request_line_wins(self):
        """A later GET-looking line does not replace the first path."""
        raw = b"GET /first.html HTTP/1.1\r\nGET /second.html HTTP/1.1\r\n\r\n"
        assert parse_request(io.BytesIO(raw)).path == "/first.html"

    def test_extra_whitespace_between_tokens(self):
        raw = b"GET \t /spaced.html  HTTP/1.1\r\n\r\n"
        assert parse_request(io.BytesIO(raw)).path == "/spaced.html"

    @pytest.mark.parametrize("raw", [
        b"GET\r\n\r\n",                         # no path, no space
        b"GET /index.html\r\n\r\n",             # no terminator after the path
        b"GET \r\n\r\n",                        # space but no path
        b"POST /form HTTP/1.1\r\n\r\n",         # not a GET line
        b"get /lower.html HTTP/1.1\r\n\r\n",    # method is case-sensitive
        b"Host: localhost\r\n\r\n",             # no request line at all
        b"\r\n",                                # empty head
        b"",                                    # connection closed immediately
        b"\xff\xfe GET /x \r\n\r\n",            # garbage bytes first
    ])
    def test_malformed_requests_give_empty_path(self, raw: bytes):
        """Malformed input degrades to an empty path instead of raising."""
        request = parse_request(io.BytesIO(raw))

        assert request.path == ""
        assert request.is_empty is True

    def test_malformed_line_does_not_block_later_request_line(self):
        raw = b"GET /truncated\r\nGET /real.html HTTP/1.1\r\n\r\n"
        assert parse_request(io.BytesIO(raw)).path == "/real.html"

    def test_undecodable_bytes_are_replaced(self):
        """Invalid UTF-8 in the path never raises."""
        raw = b"GET /caf\xe9.html HTTP/1.1\r\n\r\n"
        request = parse_request(io.BytesIO(raw))

        assert request.path == "/caf\ufffd.html"

    def test_overlong_line_is_not_a_request_line(self):
        """A line longer than max_line_size is read in pieces and ignored."""
        parser = RequestParser(max_line_size=16)
        raw = b"GET /" + b"a" * 100 + b" HTTP/1.1\r\n\r\n"

        assert parser.parse(io.BytesIO(raw)).path == ""

    def test_overlong_line_tail_is_not_the_blank_line(self):
        """The leftover CRLF of a line split across reads does not end the head."""
        raw = b"X" * 65536 + b"\r\n" + b"GET /real.html HTTP/1.1\r\n\r\n"

        assert parse_request(io.BytesIO(raw)).path == "/real.html"

    def test_overlong_line_tail_is_not_a_request_line(self):
        """A GET that starts partway through a long line is not a request line."""
        parser = RequestParser(max_line_size=32)
        raw = b"X" * 32 + b"GET /inside.html HTTP/1.1\r\n" + b"GET /real.html HTTP/1.1\r\n\r\n"

        assert parser.parse(io.BytesIO(raw)).path == "/real.html"

    def test_overlong_line_at_end_of_stream(self):
        parser = RequestParser(max_line_size=16)

        assert parser.parse(io.BytesIO(b"Y" * 40)).path == ""

    def test_stream_errors_propagate(self):
        """I/O failures are not malformed input; the caller handles them."""

        class BrokenStream:
            def readline(self, size=-1):
                raise ConnectionResetError("peer reset")

        with pytest.raises(OSError):
            parse_request(BrokenStream())


class TestParseRequestLine:
    """Tests for the single-line tokenizer."""

    def test_returns_path(self):
        assert RequestParser().parse_request_line("GET /a/b.gif HTTP/1.1") == "/a/b.gif"

    def test_returns_none_without_terminator(self):
        assert RequestParser().parse_request_line("GET /a/b.gif") is None


class TestParsedRequest:
    """Tests for ParsedRequest dataclass."""

    def test_default_is_empty(self):
        assert ParsedRequest().path == ""

    def test_is_immutable(self):
        request = ParsedRequest(path="/x")
        with pytest.raises(AttributeError):
            request.path = "/y"
