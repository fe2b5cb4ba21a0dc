"""Shared state of one download run: worker pools, file sizes, futures and parts."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any

from rangefetch.threadpool import ThreadPool

log = logging.getLogger(__name__)

DEFAULT_WAIT_TIME = 10.0

FuturePair = tuple[int, Future]


class Context:
    """Bookkeeping for the files being downloaded and the pools doing the work.

    ``wait_time`` is how many seconds to wait on one download before it is
    retried. ``read_sizes``, ``part_ranges`` and ``file_urls`` map a file name
    to the bytes confirmed so far, the byte range of every part and the URL
    the file comes from. ``file_sizes`` and ``file_futures`` map a file name to
    its expected size and to its pending ``(part index, future)`` pairs; part
    index -1 marks a download that is not split into ranges.
    """

    def __init__(self, downloader_count: int) -> None:
        self.download_pool = ThreadPool(downloader_count)
        self.combiner_pool = ThreadPool(1)
        self.wait_time = DEFAULT_WAIT_TIME
        self.read_sizes: dict[str, int] = {}
        self.part_ranges: dict[str, list[str]] = {}
        self.file_urls: dict[str, str] = {}
        self.file_sizes: dict[str, int] = {}
        self.file_futures: dict[str, list[FuturePair]] = {}
        self._file_parts: dict[str, int] = {}
        self._file_dirs: dict[str, str] = {}
        self._combine_futures: dict[str, Future] = {}

    def add_file_size(self, file_name: str, size: int) -> None:
        """Record the expected size of ``file_name``; the first size recorded wins."""
        if file_name in self.file_sizes:
            log.debug("file %s already registered", file_name)
            return
        self.file_sizes[file_name] = size

    def file_size(self, file_name: str) -> int:
        """Expected size of ``file_name``, 0 if none was recorded."""
        return self.file_sizes.get(file_name, 0)

    def add_future(self, file_name: str, part_index: int, future: Future) -> None:
        """Add a pending download of part ``part_index`` of ``file_name``."""
        self.file_futures.setdefault(file_name, []).append((part_index, future))

    def replace_futures(self, file_name: str, futures: list[FuturePair]) -> None:
        """Replace all pending downloads of ``file_name``."""
        self.file_futures[file_name] = list(futures)

    def futures(self, file_name: str) -> list[FuturePair]:
        """Pending ``(part index, future)`` pairs of ``file_name``."""
        return self.file_futures.setdefault(file_name, [])

    def add_file_dir(self, file_name: str, dirname: str) -> None:
        """Associate ``file_name`` with a directory; an existing entry is kept."""
        self._file_dirs.setdefault(file_name, dirname)

    def set_file_parts(self, file_name: str, parts: int) -> None:
        """Record how many parts ``file_name`` was split into."""
        if file_name in self._file_dirs:
            raise ValueError(f"file {file_name!r} already has a directory assigned")
        self._file_parts[file_name] = parts

    def file_parts(self, file_name: str) -> int:
        """Number of parts of ``file_name``, 0 if it was not split."""
        return self._file_parts.get(file_name, 0)

    def set_combine_future(self, file_name: str, future: Future) -> None:
        """Store the future of the job joining the parts of ``file_name``."""
        log.debug("combine future added for %s", file_name)
        self._combine_futures[file_name] = future

    def combine_future(self, file_name: str) -> Future:
        """Take the combine future of ``file_name``; it can be taken only once."""
        return self._combine_futures.pop(file_name)

    def file_count(self) -> int:
        """Number of files registered for download."""
        return len(self.file_sizes)

    def close(self) -> None:
        """Shut down both worker pools."""
        self.download_pool.shutdown()
        self.combiner_pool.shutdown()
        log.debug("context closed")

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()