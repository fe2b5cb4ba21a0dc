"""Probing a remote file for its size and for byte-range support."""

from __future__ import annotations

import http.client
import logging
import urllib.request
from dataclasses import dataclass
from urllib.error import HTTPError

log = logging.getLogger(__name__)

UNKNOWN_SIZE = -1


@dataclass(frozen=True)
class RemoteFileInfo:
    """Size of a remote file (0 on failure, -1 if unknown) and range support."""

    size: int
    supports_range: bool


class _KeepMethodRedirect(urllib.request.HTTPRedirectHandler):
    """Follows redirects without turning a HEAD request into a GET."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        new = super().redirect_request(req, fp, code, msg, headers, newurl)
        if new is not None:
            new.method = req.get_method()
        return new


_OPENER = urllib.request.build_opener(_KeepMethodRedirect())


def _content_length(headers) -> int:
    value = headers.get("Content-Length")
    if value is None:
        return UNKNOWN_SIZE
    try:
        return int(value)
    except ValueError:
        return UNKNOWN_SIZE


def _head(url: str, timeout: float, headers: dict[str, str]) -> tuple[int, int]:
    request = urllib.request.Request(url, method="HEAD", headers=headers)
    try:
        with _OPENER.open(request, timeout=timeout) as response:
            return response.status, _content_length(response.headers)
    except HTTPError as exc:
        exc.close()
        return exc.code, UNKNOWN_SIZE
    except (OSError, http.client.HTTPException) as exc:
        log.debug("request to %s failed: %s", url, exc)
        return 0, UNKNOWN_SIZE


def probe_remote_file(url: str, timeout: float = 10.0) -> RemoteFileInfo:
    """Ask the server for the size of ``url`` and whether it serves byte ranges."""
    status, length = _head(url, timeout, {})
    log.debug("response code: %d", status)
    if status == 200:
        size = length
        log.debug("file size: %d", size)
    else:
        log.debug("request failed")
        size = 0
    range_status, _ = _head(url, timeout, {"Range": "bytes=0-0"})
    return RemoteFileInfo(size=size, supports_range=range_status == 206)