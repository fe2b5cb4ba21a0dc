"""A fixed-size pool of worker threads that run submitted callables."""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable

log = logging.getLogger(__name__)


class ThreadPool:
    """Runs submitted callables on a fixed number of threads.

    On shutdown, workers finish the task they are running; tasks still
    waiting in the queue are cancelled.
    """

    def __init__(self, workers: int) -> None:
        if workers < 1:
            raise ValueError("a thread pool needs at least one worker")
        self._tasks: deque[tuple[Future, Callable[..., Any], tuple, dict]] = deque()
        self._cond = threading.Condition()
        self._stopped = False
        self._threads = [
            threading.Thread(target=self._work, name=f"rangefetch-worker-{i}", daemon=True)
            for i in range(workers)
        ]
        for thread in self._threads:
            thread.start()

    def _work(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._stopped or bool(self._tasks))
                if self._stopped or not self._tasks:
                    log.debug("worker stopping")
                    return
                future, fn, args, kwargs = self._tasks.popleft()
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn(*args, **kwargs)`` and return a future for its result."""
        future: Future = Future()
        with self._cond:
            if self._stopped:
                raise RuntimeError("cannot submit to a thread pool that has been shut down")
            self._tasks.append((future, fn, args, kwargs))
            self._cond.notify()
        return future

    def shutdown(self) -> None:
        """Stop the workers, cancel queued tasks and wait for running ones."""
        with self._cond:
            self._stopped = True
            pending = list(self._tasks)
            self._tasks.clear()
            self._cond.notify_all()
        for future, *_ in pending:
            future.cancel()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()
        log.debug("thread pool shut down")

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()