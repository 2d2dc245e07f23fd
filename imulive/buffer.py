"""A shared orientation buffer fed by a producer and drained by a consumer."""

from __future__ import annotations

import logging
import threading
import time as _time
from collections import deque
from typing import Any, Callable

from imulive.threadpool import ThreadPoolContainer

log = logging.getLogger(__name__)


class OrientationBuffer:
    """A bounded first-in first-out queue of ``(time, table)`` pairs.

    Pushing onto a full buffer drops the oldest entry to make room.
    """

    def __init__(self, max_size: int) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._items: deque[tuple[float, Any]] = deque()
        self._condition = threading.Condition()

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def push(self, time: float, table: Any) -> None:
        """Append a table with its time stamp, dropping the oldest if full."""
        with self._condition:
            if len(self._items) >= self.max_size:
                self._items.popleft()
            self._items.append((float(time), table))
            self._condition.notify_all()

    def pop(self) -> tuple[float, Any]:
        """Remove and return the oldest ``(time, table)`` pair."""
        with self._condition:
            if not self._items:
                raise IndexError("orientation buffer is empty")
            return self._items.popleft()

    def _wait_pop(self, timeout: float) -> tuple[float, Any] | None:
        with self._condition:
            if not self._items:
                self._condition.wait(timeout)
            if not self._items:
                return None
            return self._items.popleft()

    def clear(self) -> None:
        """Discard every buffered entry."""
        with self._condition:
            self._items.clear()


def producer_loop(
    reader: Any,
    buffer: OrientationBuffer,
    delay_ms: float,
    should_run: Callable[[], bool],
) -> int:
    """Read orientations and push them into ``buffer`` until ``should_run`` is false.

    ``reader`` provides ``update_quaternion_table()``, ``time`` and ``table``.
    A new entry is pushed only once more than ``delay_ms`` milliseconds have
    passed since the previous push. Returns the number of entries pushed.
    """
    pushed = 0
    last_push = _time.perf_counter()
    while True:
        reader.update_quaternion_table()
        stamp = reader.time
        elapsed_ms = (_time.perf_counter() - last_push) * 1000.0
        if elapsed_ms > delay_ms:
            buffer.push(stamp, reader.table)
            pushed += 1
            last_push = _time.perf_counter()
        if not should_run():
            break
    log.info("Producer done!")
    return pushed


def consumer_loop(
    buffer: OrientationBuffer,
    pool: ThreadPoolContainer,
    handler: Callable[[Any, float, int], Any],
    should_run: Callable[[], bool],
) -> int:
    """Hand buffered tables to ``pool`` until ``should_run`` is false.

    Each entry is passed as ``handler(table, time, order_index)`` with order
    indices counting up from 1. Returns the number of entries dispatched.
    """
    order_index = 0
    while True:
        item = buffer._wait_pop(0.01)
        if item is not None:
            stamp, table = item
            order_index += 1
            pool.offer_future(handler, table, stamp, order_index)
        if not should_run():
            break
    log.info("Consumer done!")
    return order_index