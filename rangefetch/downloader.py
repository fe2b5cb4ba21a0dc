"""Splitting downloads into byte ranges, retrying failed parts and joining them."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Sequence

from rangefetch import tasks
from rangefetch.context import Context, FuturePair
from rangefetch.http_helper import probe_remote_file
from rangefetch.util import (
    generate_download_dir,
    generate_range,
    get_file_path,
    parse_file_name,
    parse_options,
)

log = logging.getLogger(__name__)

_WHOLE_FILE = -1


def download(context: Context, urls: Sequence[str], part_size: int) -> None:
    """Register every URL in ``context`` and queue its downloads.

    Files on servers that serve byte ranges are split into parts of
    ``part_size + 1`` bytes; others are fetched whole.
    """
    for url in urls:
        file_name = parse_file_name(url)
        if file_name is None:
            log.warning("cannot take a file name from %s", url)
            continue
        info = probe_remote_file(url)
        if info.supports_range:
            log.info("remote server supports ranges for %s", url)
        try:
            generate_download_dir(file_name)
        except OSError as exc:
            log.error("cannot create download directory for %s: %s", file_name, exc)
            continue

        context.add_file_size(file_name, info.size)
        pool = context.download_pool
        if not info.supports_range:
            context.add_future(
                file_name,
                _WHOLE_FILE,
                pool.submit(tasks.download, url, get_file_path(file_name)),
            )
            continue

        context.file_urls[file_name] = url
        start, end = 0, part_size
        part = 0
        while start < info.size:
            byte_range = generate_range(start, min(end, info.size))
            log.debug("range %s", byte_range)
            context.add_future(
                file_name,
                part,
                pool.submit(
                    tasks.download_part, url, get_file_path(file_name, part), byte_range
                ),
            )
            context.part_ranges.setdefault(file_name, []).append(byte_range)
            start = end + 1
            end = start + part_size
            part += 1
        context.set_file_parts(file_name, part)


def _resubmit(context: Context, file_name: str, index: int) -> FuturePair:
    url = context.file_urls.get(file_name, "")
    pool = context.download_pool
    if index == _WHOLE_FILE:
        return index, pool.submit(tasks.download, url, get_file_path(file_name))
    byte_range = context.part_ranges[file_name][index]
    return index, pool.submit(
        tasks.download_part, url, get_file_path(file_name, index), byte_range
    )


def _collect(context: Context, file_name: str, part_size: int) -> bool:
    """Gather finished parts of ``file_name``, requeue failed ones; True once complete."""
    size = context.file_size(file_name)
    part_count = context.file_parts(file_name)
    retry: list[FuturePair] = []

    for index, future in context.futures(file_name):
        try:
            read = future.result(timeout=context.wait_time)
        except FutureTimeout:
            future.cancel()
            log.info("part %d of %s timed out, retrying", index, file_name)
            retry.append(_resubmit(context, file_name, index))
            continue
        log.debug("part %d of %s read %d bytes", index, file_name, read)

        if index == _WHOLE_FILE:
            if read != size:
                retry.append(_resubmit(context, file_name, index))
            else:
                context.read_sizes[file_name] = read
        elif read == part_size + 1:
            context.read_sizes[file_name] = context.read_sizes.get(file_name, 0) + read
            log.debug("have read %d of %s", context.read_sizes[file_name], file_name)
        elif index != part_count - 1:
            log.info("part %d of %s read incorrectly, retrying", index, file_name)
            retry.append(_resubmit(context, file_name, index))
        elif context.read_sizes.get(file_name, 0) + read == size:
            context.read_sizes[file_name] = size
            log.debug("finished reading %s from server", file_name)
            break
        else:
            retry.append(_resubmit(context, file_name, index))

    if context.read_sizes.get(file_name, 0) == size:
        return True
    if not retry:
        raise RuntimeError(
            f"download of {file_name!r} stalled at "
            f"{context.read_sizes.get(file_name, 0)} of {size} bytes"
        )
    context.replace_futures(file_name, retry)
    return False


def _finish_whole_downloads(context: Context) -> None:
    for file_name, size in context.file_sizes.items():
        if context.file_parts(file_name):
            continue
        for _, future in context.futures(file_name):
            read = future.result()
            if read != size:
                log.warning("%s: read %d bytes, expected %d", file_name, read, size)


def wait_and_combine(context: Context, part_size: int) -> None:
    """Wait for every download in ``context`` and join the parts of split files."""
    done: set[str] = set()
    while len(done) < context.file_count():
        for file_name in list(context.file_sizes):
            if file_name in done:
                continue
            if not context.file_parts(file_name):
                done.add(file_name)
                continue
            if _collect(context, file_name, part_size):
                done.add(file_name)
                log.info("read %s from server", file_name)
                combine: Future = context.combiner_pool.submit(
                    tasks.combine_parts, file_name, context.file_parts(file_name)
                )
                context.set_combine_future(file_name, combine)

    _finish_whole_downloads(context)

    for file_name, size in context.file_sizes.items():
        if not context.file_parts(file_name):
            continue
        combined = context.combine_future(file_name).result()
        if combined == size:
            log.info("combined file %s successfully", file_name)
        else:
            log.warning("combined %s has %d bytes, expected %d", file_name, combined, size)


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    logging.basicConfig(level=logging.INFO)
    options = parse_options(argv)
    with Context(options.concurrency) as context:
        download(context, options.urls, options.part_size)
        wait_and_combine(context, options.part_size)
    return 0