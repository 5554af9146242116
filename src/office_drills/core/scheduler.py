"""
Single-threaded tick schedulers.

A scheduler hands out a TickHandle for every callback it queues. Cancelling
the handle guarantees the callback never runs, so an owner can replace its
pending tick without racing the old one.

Two implementations share the same surface:

- ManualScheduler: virtual clock advanced explicitly (tests, simulations)
- RealtimeScheduler: wall clock, blocks in ``run_until`` between callbacks
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Protocol


@dataclass(eq=False)
class TickHandle:
    """Cancellation token for one queued callback."""

    due: float  # scheduler-relative seconds
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    """Anything that can tell the time and run a callback later."""

    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle: ...


@dataclass
class _Queue:
    """Heap of pending handles ordered by due time, then insertion order."""

    entries: list[tuple[float, int, TickHandle]] = field(default_factory=list)
    counter: itertools.count = field(default_factory=itertools.count)

    def push(self, handle: TickHandle) -> None:
        heapq.heappush(self.entries, (handle.due, next(self.counter), handle))

    def peek_due(self) -> float | None:
        self._drop_cancelled()
        return self.entries[0][0] if self.entries else None

    def pop(self) -> TickHandle:
        return heapq.heappop(self.entries)[2]

    def _drop_cancelled(self) -> None:
        while self.entries and self.entries[0][2].cancelled:
            heapq.heappop(self.entries)

    def __len__(self) -> int:
        return sum(1 for _, _, h in self.entries if not h.cancelled)


class ManualScheduler:
    """
    Virtual-time scheduler.

    Time only moves when ``advance`` is called; callbacks due within the
    advanced window fire in order, each seeing ``now()`` equal to its own due
    time. Callbacks may queue new callbacks, which also fire if they fall
    inside the window.
    """

    def __init__(self, start: datetime | None = None):
        self._epoch = start or datetime(2024, 1, 1, 9, 0, 0)
        self._elapsed = 0.0
        self._queue = _Queue()

    def now(self) -> datetime:
        return self._epoch + timedelta(seconds=self._elapsed)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle:
        handle = TickHandle(due=self._elapsed + max(delay, 0.0), callback=callback)
        self._queue.push(handle)
        return handle

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) callbacks."""
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run everything that falls due.

        Args:
            seconds: How far to move the virtual clock

        Returns:
            Number of callbacks executed
        """
        target = self._elapsed + seconds
        fired = 0
        while True:
            due = self._queue.peek_due()
            if due is None or due > target:
                break
            handle = self._queue.pop()
            self._elapsed = due
            handle.callback()
            fired += 1
        self._elapsed = target
        return fired


class RealtimeScheduler:
    """
    Wall-clock scheduler for interactive use.

    Nothing runs in the background: callbacks only fire while the caller is
    inside ``run_until``.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep
        self._queue = _Queue()

    def now(self) -> datetime:
        return datetime.now()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TickHandle:
        handle = TickHandle(due=self._clock() + max(delay, 0.0), callback=callback)
        self._queue.push(handle)
        return handle

    def run_until(self, done: Callable[[], bool], timeout: float | None = None) -> bool:
        """
        Run due callbacks until ``done()`` is true or nothing is left to run.

        Args:
            done: Predicate checked after every callback
            timeout: Give up after this many seconds (None = no limit)

        Returns:
            True if ``done()`` became true, False on timeout or empty queue
        """
        deadline = None if timeout is None else self._clock() + timeout
        while not done():
            due = self._queue.peek_due()
            if due is None:
                return False
            if deadline is not None and due > deadline:
                return False
            wait = due - self._clock()
            if wait > 0:
                self._sleep(wait)
            handle = self._queue.pop()
            if not handle.cancelled:
                handle.callback()
        return True
