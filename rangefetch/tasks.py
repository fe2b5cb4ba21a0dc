"""Download tasks for whole files and byte ranges, and joining of parts."""

from __future__ import annotations

import http.client
import logging
import os
import shutil
import urllib.request
from urllib.error import HTTPError

from rangefetch.util import file_size, get_file_path

log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_COPY_SIZE = 2048


def _fetch(url: str, path: str, headers: dict[str, str]) -> int:
    """Write the response body for ``url`` to ``path``; return bytes received."""
    request = urllib.request.Request(url, headers=headers)
    written = 0
    with open(path, "wb") as sink:
        try:
            response = urllib.request.urlopen(request)
        except HTTPError as exc:
            log.debug("%s answered %d", url, exc.code)
            response = exc
        except (OSError, http.client.HTTPException) as exc:
            log.debug("request to %s failed: %s", url, exc)
            return written
        with response:
            while True:
                try:
                    chunk = response.read(_CHUNK_SIZE)
                except (OSError, http.client.HTTPException) as exc:
                    log.debug("transfer from %s interrupted: %s", url, exc)
                    break
                if not chunk:
                    break
                sink.write(chunk)
                written += len(chunk)
    return written


def download(url: str, path: str) -> int:
    """Download the whole of ``url`` into ``path``; return the bytes received."""
    return _fetch(url, path, {})


def download_part(url: str, path: str, byte_range: str) -> int:
    """Download the inclusive range ``byte_range`` ("start-end") into ``path``."""
    return _fetch(url, path, {"Range": f"bytes={byte_range}"})


def combine_parts(filename: str, parts: int) -> int:
    """Join the part files of ``filename`` in order, deleting each; return total size."""
    total = 0
    with open(get_file_path(filename), "wb") as sink:
        for index in range(parts):
            part_path = get_file_path(filename, index)
            with open(part_path, "rb") as source:
                size = file_size(source)
                log.debug("part %s has %d bytes", part_path, size)
                shutil.copyfileobj(source, sink, _COPY_SIZE)
            os.remove(part_path)
            total += size
    return total