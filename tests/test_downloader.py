import os
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from rangefetch.context import Context
from rangefetch.downloader import download, main, wait_and_combine
from rangefetch.util import get_file_path

CONTENT = bytes(range(256)) * 40
FILE_NAME = "data.bin"


class _Handler(BaseHTTPRequestHandler):
    content = b""
    ranges = True

    def _reply(self, with_body):
        data = self.content
        header = self.headers.get("Range")
        if header and self.ranges:
            first, last = header.split("=", 1)[1].split("-")
            start = int(first)
            end = min(int(last), len(data) - 1)
            body = data[start : end + 1]
            self.send_response(206)
            self.send_header("Content-Range", f"bytes {start}-{end}/{len(data)}")
        else:
            body = data
            self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if with_body:
            self.wfile.write(body)

    def do_HEAD(self):
        self._reply(False)

    def do_GET(self):
        self._reply(True)

    def log_message(self, *args):
        pass


@pytest.fixture
def serve():
    servers = []

    def start(content, ranges=True):
        handler = type("Handler", (_Handler,), {"content": content, "ranges": ranges})
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_port}/{FILE_NAME}"

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _read(path):
    with open(path, "rb") as handle:
        return handle.read()


def test_ranged_download_is_split_and_combined(serve, workdir):
    url = serve(CONTENT)
    with Context(3) as ctx:
        download(ctx, [url], 1000)
        parts = ctx.file_parts(FILE_NAME)
        assert parts > 1
        assert len(ctx.part_ranges[FILE_NAME]) == parts
        assert ctx.part_ranges[FILE_NAME][0] == "0-1000"
        assert ctx.file_urls[FILE_NAME] == url
        assert ctx.file_size(FILE_NAME) == len(CONTENT)
        wait_and_combine(ctx, 1000)
        assert ctx.read_sizes[FILE_NAME] == len(CONTENT)
    assert _read(get_file_path(FILE_NAME)) == CONTENT
    for index in range(parts):
        assert not os.path.exists(get_file_path(FILE_NAME, index))


def test_download_without_range_support(serve, workdir):
    url = serve(CONTENT, ranges=False)
    with Context(2) as ctx:
        download(ctx, [url], 1000)
        assert ctx.file_parts(FILE_NAME) == 0
        assert [index for index, _ in ctx.futures(FILE_NAME)] == [-1]
        wait_and_combine(ctx, 1000)
    assert _read(get_file_path(FILE_NAME)) == CONTENT


def test_url_without_file_name_is_skipped(workdir):
    with Context(1) as ctx:
        download(ctx, ["no-slash-here"], 1000)
        assert ctx.file_count() == 0
        wait_and_combine(ctx, 1000)
        assert ctx.file_count() == 0


def test_main_downloads_file(serve, workdir):
    url = serve(CONTENT)
    assert main(["-u", url, "--partsize", "4000", "-t", "2"]) == 0
    assert _read(get_file_path(FILE_NAME)) == CONTENT


def test_main_without_url_exits():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 1