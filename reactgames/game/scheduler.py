from __future__ import annotations

import heapq
import itertools
from typing import Callable


class Timer:
    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.fired


class Scheduler:
    """
    Cooperative timer queue in integer milliseconds.

    Nothing runs on its own: whoever owns the clock calls advance_to(now_ms)
    (every frame in the game, by hand in tests) and every timer due by then
    fires, earliest first. While a callback runs, now_ms equals that timer's
    due time, so callbacks see the moment they were scheduled for rather than
    the frame time.
    """

    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms
        self._queue: list[tuple[int, int, Timer]] = []
        self._seq = itertools.count()

    def call_at(self, due_ms: int, callback: Callable[[], None]) -> Timer:
        timer = Timer(max(due_ms, self.now_ms), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Timer:
        return self.call_at(self.now_ms + max(0, delay_ms), callback)

    def next_due_ms(self) -> int | None:
        self._drop_cancelled()
        if not self._queue:
            return None
        return self._queue[0][0]

    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if t.active)

    def advance_to(self, now_ms: int) -> int:
        """Fires every timer due at or before now_ms. Returns how many fired."""
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > now_ms:
                break
            due_ms, _, timer = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due_ms)
            timer.fired = True
            timer.callback()
            fired += 1
        self.now_ms = max(self.now_ms, now_ms)
        return fired

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class ManualClock:
    """Test/replay driver: time only moves when advance() is called."""

    def __init__(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler

    @property
    def now_ms(self) -> int:
        return self.scheduler.now_ms

    def advance(self, elapsed_ms: int) -> int:
        return self.scheduler.advance_to(self.scheduler.now_ms + elapsed_ms)
