# rangefetch

`rangefetch` downloads files over HTTP using a pool of worker threads. It uses only the Python standard library.

## How a download works

For each URL, `rangefetch` does the following:

1. It takes the file name from the text after the last `/` of the URL. A URL without a `/` is skipped.
2. It sends a `HEAD` request to learn the file's size. If the answer is not `200`, the size is taken as 0.
3. It sends a second `HEAD` request with `Range: bytes=0-0`. An answer of `206` means the server accepts byte ranges.

**When the server accepts ranges**, the file is split into inclusive ranges of `part_size + 1` bytes. Each range is fetched into its own part file, named `<file>_0`, `<file>_1` and so on.

- A part is requested again if it arrives with the wrong number of bytes.
- A part is also requested again if it does not finish within the context's `wait_time`, which is 10 seconds.
- If nothing is left to retry and the file is still incomplete, a `RuntimeError` is raised.
- Once all bytes have arrived, the parts are joined in order into the final file, and each part file is deleted.

**When the server does not accept ranges**, the file is fetched in a single request. If the number of bytes received differs from the expected size, a warning is logged.

Downloads go into a directory under the current working directory:

- For a name longer than three characters, the directory is named after the first three characters followed by `_download`. For example, `archive.tar.gz` is saved as `arc_download/archive.tar.gz`.
- Shorter names go into `_download/`.

## Installation

```
pip install .
```

## Command line

```
rangefetch -u "https://example.com/files/archive.tar.gz"
```

To download several files, separate the URLs with `;`:

```
rangefetch -u "https://example.com/a.bin;https://example.com/b.bin" -t 8
```

| Option | Meaning | Default |
| --- | --- | --- |
| `-u`, `--urls` | URL(s) to download, separated by `;` (required) | — |
| `-t`, `--threads` | Number of download threads | 4 |
| `--partsize` | Part size; each range covers `partsize + 1` bytes | 1048576 |
| `-h`, `--help` | Show the help message | — |

If no URL is given, the command prints its usage and exits with status 1. Unknown options are ignored. Progress is logged at INFO level.

## Library use

```python
from rangefetch.context import Context
from rangefetch.downloader import download, wait_and_combine

with Context(4) as context:
    download(context, ["https://example.com/files/archive.tar.gz"], 1024 * 1024)
    wait_and_combine(context, 1024 * 1024)
```

Leaving the `with` block shuts down the context's worker pools.

The building blocks are also available on their own:

- `rangefetch.util`
  - `parse_file_name`, `download_dir`, `generate_download_dir` and `get_file_path` name files and directories.
  - `split_urls` and `generate_range` build URL lists and range strings.
  - `file_size` gives the size of a seekable stream.
  - `parse_options` reads the command line and returns an `Options` dataclass.
  - `compute_download_speed` returns bytes per second.
- `rangefetch.threadpool.ThreadPool`: a fixed-size pool of threads.
  - `submit` returns a `concurrent.futures.Future`.
  - `shutdown` cancels queued tasks and waits for running ones.
  - The pool can be used as a context manager.
- `rangefetch.http_helper.probe_remote_file(url, timeout=10.0)` returns a `RemoteFileInfo` with `size` and `supports_range`.
- `rangefetch.tasks`
  - `download` fetches a whole file.
  - `download_part` fetches one byte range.
  - `combine_parts` joins the part files of a file and returns the total size.
- `rangefetch.context.Context` holds the shared state of one run: the worker pools, expected sizes, pending futures, part ranges and the bytes received so far.

## What it does not do

- It does not resume an interrupted run. Every run starts each download afresh.
- A download that is not split into ranges is not retried. A size mismatch is only logged.
- It shows no progress bar or transfer speed while downloading.

## Running the tests

```
pip install .[test]
pytest
```