"""Helpers for file naming, download paths, byte ranges and command-line options."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Sequence

log = logging.getLogger(__name__)

DEFAULT_PART_SIZE = 1024 * 1024
DEFAULT_THREADS = 4
_DIR_SUFFIX = "_download"


@dataclass
class Options:
    """Settings taken from the command line."""

    urls: list[str] = field(default_factory=list)
    concurrency: int = DEFAULT_THREADS
    part_size: int = DEFAULT_PART_SIZE


def parse_file_name(url: str) -> str | None:
    """Return the text after the last '/' of ``url``, or None if it has none."""
    _, sep, tail = url.rpartition("/")
    if not sep:
        return None
    log.debug("parsed file name: %s", tail)
    return tail


def download_dir(filename: str) -> str:
    """Name of the directory that holds the download of ``filename``."""
    prefix = filename[:3] if len(filename) > 3 else ""
    return prefix + _DIR_SUFFIX


def generate_download_dir(filename: str) -> str:
    """Create the download directory for ``filename`` if needed and return its name."""
    directory = download_dir(filename)
    if os.path.exists(directory):
        log.debug("download directory %s exists", directory)
        return directory
    Path(directory).mkdir()
    log.debug("created directory %s", directory)
    return directory


def get_file_path(filename: str, part: int | None = None) -> str:
    """Path of the finished file, or of part number ``part`` when given."""
    path = f"{download_dir(filename)}/{filename}"
    if part is not None:
        path = f"{path}_{part}"
    log.debug("file path: %s", path)
    return path


def split_urls(urls: str) -> list[str]:
    """Split a ';'-separated list of URLs."""
    return urls.split(";")


def generate_range(start: int, end: int) -> str:
    """Inclusive byte range in the form used by the HTTP Range header."""
    return f"{start}-{end}"


def file_size(stream: IO[bytes]) -> int:
    """Size of a seekable stream; leaves the stream positioned at its start."""
    size = stream.seek(0, os.SEEK_END)
    stream.seek(0)
    return size


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Allowed Options")
    parser.add_argument("-u", "--urls", help="URL for the resource, split by ;")
    parser.add_argument(
        "--partsize", type=int, default=DEFAULT_PART_SIZE, help="File Part size"
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=DEFAULT_THREADS,
        help="Concurrency number of threads for download",
    )
    return parser


def parse_options(argv: Sequence[str] | None = None) -> Options:
    """Parse command-line arguments; exits with status 1 when no URL is given."""
    parser = _build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        log.debug("ignoring unknown options: %s", unknown)
    if not args.urls:
        log.error("a URL is required")
        parser.print_usage()
        raise SystemExit(1)
    urls = split_urls(args.urls)
    for url in urls:
        log.debug("url: %s", url)
    log.debug("concurrency: %d, part size: %d", args.threads, args.partsize)
    return Options(urls=urls, concurrency=args.threads, part_size=args.partsize)


def compute_download_speed(delta_seconds: float, delta_size: float) -> float:
    """Download speed in bytes per second."""
    if delta_seconds == 0:
        raise ValueError("delta_seconds must not be zero")
    return delta_size / delta_seconds