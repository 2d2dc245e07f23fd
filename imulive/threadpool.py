"""A bounded pool that keeps at most a fixed number of tasks in flight."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Callable

log = logging.getLogger(__name__)


class ThreadPoolContainer:
    """Runs offered functions on worker threads, never more than ``max_threads`` at once.

    When the limit is reached, offering a new function blocks until the oldest
    finished task is found and dropped.
    """

    def __init__(self, max_threads: int) -> None:
        if max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        self.max_threads = max_threads
        self._executor = ThreadPoolExecutor(max_workers=max_threads)
        self._futures: list[Future] = []

    @property
    def pending(self) -> int:
        """Number of tracked tasks not yet collected."""
        return len(self._futures)

    def offer_future(self, function: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Schedule ``function``; wait for a slot if the pool is full."""
        if len(self._futures) >= self.max_threads:
            wait(self._futures, return_when=FIRST_COMPLETED)
            finished = next(f for f in self._futures if f.done())
            self._futures.remove(finished)
        future = self._executor.submit(function, *args, **kwargs)
        self._futures.append(future)
        return future

    def wait_for_finish(self) -> None:
        """Block until every offered task has finished, oldest first."""
        while self._futures:
            log.info(
                "Waiting for all threads in the thread pool to finish. Threads remaining: %d",
                len(self._futures),
            )
            wait([self._futures[0]])
            self._futures.pop(0)
        log.info("All threads in the thread pool have finished.")

    def shutdown(self) -> None:
        """Finish all tasks and release the worker threads."""
        self.wait_for_finish()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> ThreadPoolContainer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()