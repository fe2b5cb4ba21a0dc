import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from rangefetch.http_helper import RemoteFileInfo, probe_remote_file

DATA = bytes(range(256)) * 10


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, *args):
        pass

    def do_HEAD(self):
        if self.path == "/missing":
            self.send_response(404)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        if self.path == "/redirect":
            self.send_response(302)
            self.send_header("Location", "/file.bin")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        if self.path == "/file.bin" and self.headers.get("Range"):
            self.send_response(206)
            self.send_header("Content-Range", f"bytes 0-0/{len(DATA)}")
            self.send_header("Content-Length", "1")
            self.end_headers()
            return
        self.send_response(200)
        self.send_header("Content-Length", str(len(DATA)))
        self.end_headers()


@pytest.fixture
def base_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
    thread.join(5)


def test_range_capable_server(base_url):
    info = probe_remote_file(base_url + "/file.bin")
    assert info == RemoteFileInfo(size=len(DATA), supports_range=True)


def test_server_without_range_support(base_url):
    info = probe_remote_file(base_url + "/norange.bin")
    assert info.size == len(DATA)
    assert info.supports_range is False


def test_missing_file_has_zero_size(base_url):
    info = probe_remote_file(base_url + "/missing")
    assert info == RemoteFileInfo(size=0, supports_range=False)


def test_redirect_is_followed(base_url):
    info = probe_remote_file(base_url + "/redirect")
    assert info == RemoteFileInfo(size=len(DATA), supports_range=True)


def test_unreachable_server():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    info = probe_remote_file(f"http://127.0.0.1:{port}/file.bin", timeout=2)
    assert info == RemoteFileInfo(size=0, supports_range=False)