"""
End-to-end tests against a real listening socket, plus the CLI.
"""

import threading

import pytest

from tinyhttpd import HTTPServer, ServerConfig
from tinyhttpd.__main__ import build_parser, main
from tinyhttpd.handlers import PLACEHOLDER_PAGE, NOT_FOUND_PAGE
from conftest import split_response


class TestHTTPServer:

    def test_serves_template_from_document_root(self, running_server, document_root):
        (document_root / "tinyhttpd-home.html").write_text(
            "<h1>{{cs371server}}</h1>\r\n<p>{{cs371date}}</p>"
        )

        raw = running_server.request(b"GET /tinyhttpd-home.html HTTP/1.1\r\nHost: test\r\n\r\n")
        head, body = split_response(raw)

        assert head[0] == "HTTP/1.1 404 Not Found"
        assert "Content-Type: text/html" in head
        lines = body.split(b"\n")
        assert lines[0] == b"<h1>TestServer/0.1</h1>"
        assert lines[1].startswith(b"<p>") and b"UTC" in lines[1]
        assert lines[2] == b""

    def test_serves_placeholder_for_existing_raw_path(self, running_server, tmp_path):
        page = tmp_path / "real.html"
        page.write_text("not this")

        raw = running_server.request(f"GET {page} HTTP/1.1\r\n\r\n".encode())
        head, body = split_response(raw)

        assert head[0] == "HTTP/1.1 200 OK"
        assert body == PLACEHOLDER_PAGE

    def test_serves_image(self, running_server, document_root):
        data = bytes(range(256)) * 64
        (document_root / "pic.gif").write_bytes(data)

        head, body = split_response(running_server.request(b"GET /pic.gif HTTP/1.1\r\n\r\n"))

        assert "Content-Type: image/gif" in head
        assert body == data

    def test_concurrent_connections(self, running_server):
        results = []

        def client():
            results.append(running_server.request(b"GET /nothing-here.html HTTP/1.1\r\n\r\n"))

        threads = [threading.Thread(target=client) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        assert len(results) == 8
        assert all(split_response(r)[1] == NOT_FOUND_PAGE for r in results)

    def test_invalid_config_fails_fast(self, tmp_path):
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(document_root=str(tmp_path / "missing")))

    def test_address_is_none_when_stopped(self, config):
        assert HTTPServer(config).address is None


class TestCLI:

    def test_parser_defaults(self):
        defaults = ServerConfig(port=9000, server_name="Env")
        args = build_parser(defaults).parse_args([])

        assert args.port == 9000
        assert args.server_name == "Env"
        assert args.log_level == "INFO"

    def test_parser_overrides(self, tmp_path):
        args = build_parser(ServerConfig()).parse_args(
            ["-p", "3000", "--root", str(tmp_path), "-l", "debug", "--timezone", "UTC"]
        )

        assert args.port == 3000
        assert args.root == str(tmp_path)
        assert args.log_level == "DEBUG"
        assert args.timezone == "UTC"

    def test_bad_root_exits_nonzero(self, tmp_path, capsys):
        assert main(["--root", str(tmp_path / "missing")]) == 1
        assert "Document root" in capsys.readouterr().err

    def test_bad_environment_exits_nonzero(self, monkeypatch, capsys):
        monkeypatch.setenv("HTTP_PORT", "not-a-port")

        assert main([]) == 1
        assert "environment" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "tinyhttpd" in capsys.readouterr().out
