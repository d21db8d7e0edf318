"""Task runners the orchestrator submits per-category work to."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol

log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class Runner(Protocol):
    def submit(self, fn: Callable[..., Any], *args: Any) -> Future: ...

    def outstanding(self) -> int: ...

    def shutdown(self, wait: bool = True) -> None: ...


class TaskRunner:
    """Runs submitted work on a small thread pool.

    A few workers let several directory walks overlap without
    saturating I/O on a single disk.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        workers = max_workers or min(DEFAULT_MAX_WORKERS, os.cpu_count() or 1)
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="syscleaner-worker")
        self._lock = threading.Lock()
        self._outstanding = 0
        self.max_workers = workers

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        with self._lock:
            self._outstanding += 1
        future = self._executor.submit(fn, *args)
        future.add_done_callback(self._task_done)
        return future

    def _task_done(self, _future: Future) -> None:
        with self._lock:
            self._outstanding -= 1

    def outstanding(self) -> int:
        """Number of submitted tasks that have not finished yet."""
        with self._lock:
            return self._outstanding

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> TaskRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


class InlineRunner:
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def outstanding(self) -> int:
        return 0

    def shutdown(self, wait: bool = True) -> None:
        pass

    def __enter__(self) -> InlineRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def make_runner(max_workers: int | None = None) -> TaskRunner | InlineRunner:
    """Pick a runner for this machine.

    Falls back to running inline on single-core machines where threading
    only adds overhead.
    """
    if max_workers == 1 or (max_workers is None and (os.cpu_count() or 1) <= 1):
        log.debug("Using inline runner")
        return InlineRunner()
    return TaskRunner(max_workers)
