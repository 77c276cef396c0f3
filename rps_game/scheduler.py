"""Cancellable deferred callbacks.

The engine never sleeps or blocks; everything time-based (the move
countdown, the computer's thinking delay, the pause before the next round)
is a callback handed to a scheduler.

Usage:
    scheduler = ManualScheduler()
    handle = scheduler.call_later(1.0, tick)
    scheduler.advance(1.0)     # runs tick
    handle.cancel()            # already fired: no-op
"""

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TaskHandle:
    """A pending callback. ``cancel()`` is safe to call any number of times."""

    __slots__ = ("when", "callback", "_cancelled", "_fired", "_timer")

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False
        self._fired = False
        self._timer: Optional[threading.Timer] = None

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self):
        if not self.active:
            return
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _run(self):
        if not self.active:
            return
        self._fired = True
        self.callback()

    def __repr__(self):
        state = "active" if self.active else ("cancelled" if self._cancelled else "fired")
        return f"<TaskHandle at={self.when:.2f} {state}>"


class Scheduler(ABC):
    """Runs callbacks after a delay in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        ...


class ManualScheduler(Scheduler):
    """Virtual clock; callbacks only run inside ``advance()``.

    Callbacks scheduled while advancing run in the same call if they fall
    inside the advanced window. Ties run in scheduling order.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = TaskHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def pending(self) -> list[TaskHandle]:
        return [h for _, _, h in sorted(self._queue) if h.active]

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running everything that falls due. Returns the count run."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = when
            handle._run()
            ran += 1
        self.now = target
        return ran

    def run_until_idle(self, limit: float = 3600.0) -> int:
        """Advance until nothing is pending, bounded by ``limit`` seconds."""
        ran = 0
        deadline = self.now + limit
        while self.pending() and self.now < deadline:
            ran += self.advance(self.pending()[0].when - self.now)
        return ran


class ThreadingScheduler(Scheduler):
    """Real-time scheduler backed by ``threading.Timer``.

    Callbacks run while holding ``lock``; callers that touch the same state
    from other threads take the same lock, so the state only ever sees one
    logical thread of control.
    """

    def __init__(self, lock: Optional[threading.RLock] = None):
        self.lock = lock or threading.RLock()

    def call_later(self, delay, callback):
        handle = TaskHandle(delay, callback)

        def fire():
            with self.lock:
                try:
                    handle._run()
                except Exception:
                    logger.exception("Scheduled callback %r failed", callback)

        timer = threading.Timer(max(0.0, delay), fire)
        timer.daemon = True
        handle._timer = timer
        timer.start()
        return handle
