"""
Deferred, cancellable callbacks on a single-threaded event loop.

Used for the transient UI states that clear themselves after a delay
(returning from the photo view, the "copied" banner). Nothing runs on its
own: the owner drives the loop with `advance()` (virtual time) or
`run_pending()` (real clock).
"""

import heapq
import itertools
from typing import Callable, List, Optional


class ScheduledTask:
    """Handle for a callback scheduled with TaskScheduler.call_later."""

    def __init__(self, due_ms: float, sequence: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.sequence = sequence
        self.callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def __lt__(self, other: 'ScheduledTask') -> bool:
        return (self.due_ms, self.sequence) < (other.due_ms, other.sequence)


class TaskScheduler:
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Args:
            clock: Returns the current time in milliseconds. Without a clock the
                scheduler runs on virtual time moved forward by advance().
        """
        self._clock = clock
        self._virtual_now = 0.0
        self._queue: List[ScheduledTask] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return self._virtual_now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(self.now() + max(0, delay_ms), next(self._sequence), callback)
        heapq.heappush(self._queue, task)
        return task

    def run_pending(self) -> int:
        """
        Run every task that is due, in due order.

        Tasks scheduled by a running callback run in the same pass when they
        are already due.

        Returns:
            Number of callbacks run
        """
        ran = 0
        now = self.now()
        while self._queue and self._queue[0].due_ms <= now:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            task.done = True
            task.callback()
            ran += 1
        return ran

    def advance(self, delay_ms: float) -> int:
        """Move virtual time forward and run what became due."""
        if self._clock is not None:
            raise RuntimeError("advance() needs a scheduler running on virtual time")
        self._virtual_now += delay_ms
        return self.run_pending()

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._queue if task.pending)

    def cancel_all(self) -> None:
        for task in self._queue:
            task.cancel()
        self._queue = []
